"""Message records exchanged between bridges and the gateway, plus event names."""

from __future__ import annotations

from datetime import datetime
from typing import Any

import structlog
from pydantic import BaseModel, Field

from relay.config.schemas import ChannelOptions

logger = structlog.get_logger(__name__)

EVENT_JOIN_LEAVE = "join_leave"
EVENT_TOPIC_CHANGE = "topic_change"
EVENT_FAILURE = "failure"
EVENT_FILE_FAILURE_SIZE = "file_failure_size"
EVENT_AVATAR_DOWNLOAD = "avatar_download"
EVENT_REJOIN_CHANNELS = "rejoin_channels"
EVENT_USER_ACTION = "user_action"
EVENT_MSG_DELETE = "msg_delete"
EVENT_FILE_DELETE = "file_delete"
EVENT_API_CONNECTED = "api_connected"
EVENT_USER_TYPING = "user_typing"
EVENT_GET_CHANNEL_MEMBERS = "get_channel_members"
EVENT_NOTICE_IRC = "notice_irc"

PARENT_ID_NOT_FOUND = "msg-parent-not-found"


class FileInfo(BaseModel):
    """
    Attachment carried in Message.extra["file"].

    Receiving bridges fill data/size. When a media server is configured, the gateway
    uploads the file for protocols without native uploads and fills url/sha as well.
    """

    name: str = ""
    data: bytes | None = None
    comment: str = ""
    url: str = ""
    size: int = 0
    avatar: bool = False
    sha: str = ""
    native_id: str = ""


class Message(BaseModel):
    text: str = ""
    channel: str = ""
    username: str = ""
    original_username: str = Field("", description="username before RemoteNickFormat is applied")
    user_id: str = Field("", alias="userid")
    avatar: str = ""
    account: str = ""
    event: str = ""
    protocol: str = ""
    gateway: str = ""
    parent_id: str = ""
    timestamp: datetime | None = None
    id: str = ""
    extra: dict[str, list[Any]] = Field(default_factory=dict)

    model_config = {"populate_by_name": True}

    def parent_not_found(self) -> bool:
        return self.parent_id == PARENT_ID_NOT_FOUND

    def parent_valid(self) -> bool:
        return self.parent_id != "" and not self.parent_not_found()

    def get_file_infos(self) -> list[FileInfo]:
        """FileInfo entries of extra["file"]; anything else is skipped with a warning."""
        infos: list[FileInfo] = []
        for item in self.extra.get("file", []):
            if not isinstance(item, FileInfo):
                logger.warning("file_info_cast_failed", account=self.account, type=type(item).__name__)
                continue
            infos.append(item)
        return infos


class ChannelInfo(BaseModel):
    name: str = ""
    account: str = ""
    direction: str = ""
    id: str = ""
    same_channel: dict[str, bool] = Field(default_factory=dict)
    options: ChannelOptions = Field(default_factory=ChannelOptions)


class ChannelMember(BaseModel):
    username: str = ""
    nick: str = ""
    user_id: str = ""
    channel_id: str = ""
    channel_name: str = ""


def get_icon_url(msg: Message, icon_url: str) -> str:
    """Expand {NICK}, {BRIDGE} and {PROTOCOL} in an icon URL template for msg's "protocol.name" account."""
    protocol, _, name = msg.account.partition(".")
    icon_url = icon_url.replace("{NICK}", msg.username)
    icon_url = icon_url.replace("{BRIDGE}", name)
    icon_url = icon_url.replace("{PROTOCOL}", protocol)
    return icon_url
