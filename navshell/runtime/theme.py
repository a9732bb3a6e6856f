"""ANSI palettes for the terminal shell chrome."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ShellTheme:
    """Semantic ANSI palette used by the renderer."""

    name: str
    reset: str
    topbar: str
    title: str
    subtitle: str
    subtitle_fading: str
    sidebar: str
    sidebar_active: str
    divider: str
    drawer: str
    drawer_active: str
    backdrop: str
    status: str
    demo_banner: str


DEFAULT_THEME = ShellTheme(
    name="default",
    reset="\033[0m",
    topbar="\033[1;38;5;252m",
    title="\033[1;38;5;81m",
    subtitle="\033[38;5;250m",
    subtitle_fading="\033[2;38;5;245m",
    sidebar="\033[38;5;252m",
    sidebar_active="\033[7;38;5;81m",
    divider="\033[2m",
    drawer="\033[48;5;236;38;5;252m",
    drawer_active="\033[48;5;24;1;38;5;231m",
    backdrop="\033[2;38;5;240m",
    status="\033[7m",
    demo_banner="\033[1;38;5;232;48;5;214m",
)

PLAIN_THEME = ShellTheme(
    name="plain",
    reset="",
    topbar="",
    title="",
    subtitle="",
    subtitle_fading="",
    sidebar="",
    sidebar_active="",
    divider="",
    drawer="",
    drawer_active="",
    backdrop="",
    status="",
    demo_banner="",
)


def resolve_theme(no_color: bool) -> ShellTheme:
    return PLAIN_THEME if no_color else DEFAULT_THEME
