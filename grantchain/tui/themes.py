"""Theme system for the grantchain TUI"""

from textual.theme import Theme

GRANTCHAIN_DARK = Theme(
    name="grantchain-dark",
    primary="#4f6d7a",
    secondary="#56c2a6",
    accent="#f2b45a",
    foreground="#c9d4d8",
    background="#14202b",
    surface="#1d2b38",
    panel="#192632",
    success="#7fcf8a",
    warning="#f2b45a",
    error="#ef6f6c",
    dark=True,
    variables={
        "dialog-tint": "#56c2a6",
        "muted": "#6b8591",
    },
)

GRANTCHAIN_LIGHT = Theme(
    name="grantchain-light",
    primary="#2f4858",
    secondary="#1f8a70",
    accent="#c77d16",
    foreground="#23313b",
    background="#f6f8f7",
    surface="#e9efec",
    panel="#dde6e2",
    success="#2e9d57",
    warning="#c77d16",
    error="#d1453b",
    dark=False,
    variables={
        "dialog-tint": "#1f8a70",
        "muted": "#8a9a9f",
    },
)

THEMES = {
    "dark": GRANTCHAIN_DARK,
    "light": GRANTCHAIN_LIGHT,
}

THEME_NAMES = list(THEMES.keys())


def get_next_theme(current: str) -> str:
    """Get the next theme in the rotation"""
    try:
        idx = THEME_NAMES.index(current)
        return THEME_NAMES[(idx + 1) % len(THEME_NAMES)]
    except ValueError:
        return THEME_NAMES[0]


def pick_tint(tint_colors: tuple[str, str] | None, dark: bool) -> str | None:
    """Choose the light or dark dialog tint, None keeps the theme color"""
    if not tint_colors:
        return None
    light, dark_color = tint_colors
    return dark_color if dark else light
