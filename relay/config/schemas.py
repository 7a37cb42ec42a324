"""Pydantic schemas for the typed settings snapshot."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


def _config_key(name: str) -> str:
    """Document key for a field: config keys are matched case-insensitively, so MediaDownloadSize -> mediadownloadsize."""
    return name.replace("_", "").lower()


_SCHEMA_CONFIG = ConfigDict(
    extra="ignore",
    populate_by_name=True,
    alias_generator=_config_key,
    coerce_numbers_to_str=True,
)

PROTOCOL_FAMILIES = (
    "api",
    "irc",
    "mattermost",
    "matrix",
    "slack",
    "slacklegacy",
    "steam",
    "xmpp",
    "discord",
    "telegram",
    "rocketchat",
    "sshchat",
    "whatsapp",
    "zulip",
    "keybase",
    "mumble",
)


class ProtocolSettings(BaseModel):
    """Options for one bridge account (e.g. [irc.libera]) and for [general]. Unset fields keep zero values."""

    model_config = _SCHEMA_CONFIG

    allow_mention: list[str] = Field(default_factory=list, description="discord")
    bind_address: str = Field("", description="mattermost, slack (deprecated)")
    buffer: int = Field(0, description="api")
    charset: str = Field("", description="irc")
    client_id: str = Field("", description="msteams")
    color_nicks: bool = Field(False, description="irc")
    debug: bool = False
    debug_level: int = Field(0, description="irc")
    device_id: str = Field("", description="matrix")
    disable_web_page_preview: bool = Field(False, description="telegram")
    edit_suffix: str = ""
    edit_disable: bool = False
    html_disable: bool = Field(False, description="matrix")
    icon_url: str = Field("", description="mattermost, slack")
    ignore_failure_on_start: bool = False
    ignore_nicks: str = ""
    ignore_messages: str = ""
    jid: str = Field("", description="xmpp")
    join_delay: str = ""
    label: str = ""
    login: str = Field("", description="mattermost, matrix")
    log_file: str = Field("", description="general: redirect diagnostics to this file")
    media_download_black_list: list[str] = Field(default_factory=list, description="general: filename regexes")
    media_download_path: str = ""
    media_download_size: int = Field(0, description="general: max attachment size in bytes")
    media_server_download: str = ""
    media_convert_tgs: str = Field("", description="telegram")
    media_convert_webp_to_png: bool = Field(False, description="telegram")
    message_delay: int = Field(0, description="irc, milliseconds between messages")
    message_format: str = Field("", description="telegram")
    message_length: int = Field(0, description="irc, max message length")
    message_queue: int = Field(0, description="irc, flood control queue size")
    message_split: bool = Field(False, description="irc, split long messages instead of clipping")
    message_split_max_count: int = Field(0, description="discord")
    muc: str = Field("", description="xmpp")
    mx_id: str = Field("", description="matrix")
    name: str = ""
    nick: str = ""
    nick_formatter: str = Field("", description="mattermost, slack")
    nick_serv_nick: str = Field("", description="irc")
    nick_serv_username: str = Field("", description="irc")
    nick_serv_password: str = Field("", description="irc")
    nicks_per_row: int = Field(0, description="mattermost, slack")
    no_home_server_suffix: bool = Field(False, description="matrix")
    no_send_join_part: bool = False
    no_tls: bool = Field(False, description="mattermost, xmpp")
    password: str = ""
    pickle_key: str = Field("", description="matrix")
    prefix_messages_with_nick: bool = Field(False, description="mattermost, slack")
    preserve_threading: bool = Field(False, description="slack")
    protocol: str = ""
    quote_disable: bool = Field(False, description="telegram, discord")
    quote_format: str = Field("", description="telegram, discord")
    quote_length_limit: int = Field(0, description="telegram, discord")
    real_name: str = Field("", description="irc")
    recovery_key: str = Field("", description="matrix")
    rejoin_delay: int = Field(0, description="irc")
    replace_messages: list[list[str]] = Field(default_factory=list)
    replace_nicks: list[list[str]] = Field(default_factory=list)
    remote_nick_format: str = ""
    run_commands: list[str] = Field(default_factory=list, description="irc")
    server: str = ""
    session_file: str = Field("", description="msteams, whatsapp")
    show_join_part: bool = False
    show_topic_change: bool = Field(False, description="slack")
    show_user_typing: bool = Field(False, description="slack")
    show_embeds: bool = Field(False, description="discord")
    skip_tls_verify: bool = Field(False, description="irc, mattermost")
    skip_version_check: bool = Field(False, description="mattermost")
    strip_nick: bool = False
    strip_markdown: bool = Field(False, description="irc")
    sync_topic: bool = Field(False, description="slack")
    tengo_modify_message: str = ""
    team: str = Field("", description="mattermost")
    team_id: str = Field("", description="msteams")
    tenant_id: str = Field("", description="msteams")
    token: str = ""
    topic: str = Field("", description="zulip")
    url: str = Field("", description="mattermost, slack (deprecated)")
    use_api: bool = Field(False, description="mattermost, slack")
    use_local_avatar: list[str] = Field(default_factory=list, description="discord")
    use_sasl: bool = Field(False, description="irc")
    use_tls: bool = Field(False, description="irc")
    use_discriminator: bool = Field(False, description="discord")
    use_first_name: bool = Field(False, description="telegram")
    use_user_name: bool = Field(False, description="discord, matrix, mattermost")
    use_insecure_url: bool = Field(False, description="telegram")
    user_name: str = Field("", description="irc")
    verbose_join_part: bool = Field(False, description="irc")
    webhook_bind_address: str = Field("", description="mattermost, slack")
    webhook_url: str = Field("", description="mattermost, slack")


class ChannelOptions(BaseModel):
    """Per-channel options inside a gateway entry."""

    model_config = _SCHEMA_CONFIG

    key: str = Field("", description="irc, xmpp channel key")
    webhook_url: str = Field("", description="discord")
    topic: str = Field("", description="zulip")


class Bridge(BaseModel):
    """One account/channel pair in a gateway."""

    model_config = _SCHEMA_CONFIG

    account: str = Field("", description='"protocol.name", e.g. "irc.libera"')
    channel: str = ""
    options: ChannelOptions = Field(default_factory=ChannelOptions)
    same_channel: bool = False


class Gateway(BaseModel):
    """Routing between bridges: messages flow from in to out; inout is bidirectional."""

    model_config = _SCHEMA_CONFIG

    name: str = ""
    enable: bool = False
    in_: list[Bridge] = Field(default_factory=list, alias="in")
    out: list[Bridge] = Field(default_factory=list)
    in_out: list[Bridge] = Field(default_factory=list)


class SameChannelGateway(BaseModel):
    """Channels with the same name on several accounts treated as one room."""

    model_config = _SCHEMA_CONFIG

    name: str = ""
    enable: bool = False
    channels: list[str] = Field(default_factory=list)
    accounts: list[str] = Field(default_factory=list)


class Tengo(BaseModel):
    """Paths of message scripting hooks."""

    model_config = _SCHEMA_CONFIG

    in_message: str = ""
    message: str = ""
    remote_nick_format: str = ""
    out_message: str = ""


class BridgeValues(BaseModel):
    """Root settings snapshot: protocol families -> account name -> options, plus general, tengo and routing."""

    model_config = _SCHEMA_CONFIG

    api: dict[str, ProtocolSettings] = Field(default_factory=dict)
    irc: dict[str, ProtocolSettings] = Field(default_factory=dict)
    mattermost: dict[str, ProtocolSettings] = Field(default_factory=dict)
    matrix: dict[str, ProtocolSettings] = Field(default_factory=dict)
    slack: dict[str, ProtocolSettings] = Field(default_factory=dict)
    slack_legacy: dict[str, ProtocolSettings] = Field(default_factory=dict)
    steam: dict[str, ProtocolSettings] = Field(default_factory=dict)
    xmpp: dict[str, ProtocolSettings] = Field(default_factory=dict)
    discord: dict[str, ProtocolSettings] = Field(default_factory=dict)
    telegram: dict[str, ProtocolSettings] = Field(default_factory=dict)
    rocketchat: dict[str, ProtocolSettings] = Field(default_factory=dict)
    ssh_chat: dict[str, ProtocolSettings] = Field(default_factory=dict)
    whatsapp: dict[str, ProtocolSettings] = Field(default_factory=dict)
    zulip: dict[str, ProtocolSettings] = Field(default_factory=dict)
    keybase: dict[str, ProtocolSettings] = Field(default_factory=dict)
    mumble: dict[str, ProtocolSettings] = Field(default_factory=dict)
    general: ProtocolSettings = Field(default_factory=ProtocolSettings)
    tengo: Tengo = Field(default_factory=Tengo)
    gateway: list[Gateway] = Field(default_factory=list)
    same_channel_gateway: list[SameChannelGateway] = Field(default_factory=list)

    def protocol(self, family: str) -> dict[str, ProtocolSettings]:
        """Accounts configured for a protocol family ("irc", "slacklegacy", ...)."""
        family = family.lower()
        if family not in PROTOCOL_FAMILIES:
            raise KeyError(f"unknown protocol family: {family}")
        for name in type(self).model_fields:
            if _config_key(name) == family:
                return getattr(self, name)
        raise KeyError(f"unknown protocol family: {family}")

    def account(self, account: str) -> ProtocolSettings | None:
        """Settings for an account reference like "irc.libera" (None if not configured)."""
        family, _, name = account.partition(".")
        if not name:
            return None
        try:
            accounts = self.protocol(family)
        except KeyError:
            return None
        return accounts.get(name.lower())

    def accounts(self) -> list[str]:
        """All configured accounts as "family.name", in family order."""
        return [f"{family}.{name}" for family in PROTOCOL_FAMILIES for name in self.protocol(family)]
