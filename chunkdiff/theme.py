"""Colour themes for the interface and for syntax highlighting."""

from __future__ import annotations

from dataclasses import dataclass

from chunkdiff.styled import Color, Rgb, Style

NIGHT_BLACK = Rgb(0x0B, 0x0B, 0x0A)
CHARCOAL = Rgb(0x33, 0x33, 0x33)
SLATE_GRAY = Rgb(0x51, 0x51, 0x51)
SAGE = Rgb(0x7D, 0xAE, 0xA3)
SAND = Rgb(0xE2, 0xD2, 0xAB)
MIST_BLUE = Rgb(0x8B, 0x9B, 0xAA)
MINT_GREEN = Rgb(0x6A, 0xD1, 0x8F)
DARK_OLIVE = Rgb(0x24, 0x22, 0x12)
DUSTY_RED = Rgb(0xD3, 0x5F, 0x5F)
DARK_MAROON = Rgb(0x26, 0x13, 0x13)
AMBER = Rgb(0xF5, 0x9E, 0x0B)
COOL_GRAY = Rgb(0x8A, 0x8A, 0x8D)
DEEP_CHARCOAL = Rgb(0x16, 0x16, 0x14)
GITHUB_DARK_ADDED_BG = Rgb(0x0F, 0x2A, 0x1A)
GITHUB_DARK_REMOVED_BG = Rgb(0x2A, 0x12, 0x16)
GITHUB_DARK_FG = Rgb(0xC9, 0xD1, 0xD9)
GITHUB_DARK_MUTED = Rgb(0x8B, 0x94, 0x9E)
GITHUB_DARK_BORDER = Rgb(0x30, 0x36, 0x3D)
GITHUB_DARK_BLUE = Rgb(0x58, 0xA6, 0xFF)
GITHUB_DARK_LIGHT_BLUE = Rgb(0x79, 0xC0, 0xFF)
GITHUB_DARK_STRING = Rgb(0xA5, 0xD6, 0xFF)
GITHUB_DARK_GREEN = Rgb(0x3F, 0xB9, 0x50)
GITHUB_DARK_RED = Rgb(0xF8, 0x51, 0x49)
GITHUB_DARK_KEYWORD = Rgb(0xFF, 0x7B, 0x72)
GITHUB_DARK_ORANGE = Rgb(0xD2, 0x99, 0x22)
GITHUB_DARK_BRIGHT_ORANGE = Rgb(0xFF, 0xA6, 0x57)
GITHUB_DARK_PURPLE = Rgb(0xD2, 0xA8, 0xFF)
GRUVBOX_DARK_BG = Rgb(0x28, 0x28, 0x28)
GRUVBOX_LIGHT_FG = Rgb(0xEB, 0xDB, 0xB2)
GRUVBOX_GRAY = Rgb(0x92, 0x83, 0x74)
GRUVBOX_RED = Rgb(0xFB, 0x49, 0x34)
GRUVBOX_GREEN = Rgb(0xB8, 0xBB, 0x26)
GRUVBOX_YELLOW = Rgb(0xFA, 0xBD, 0x2F)
GRUVBOX_BLUE = Rgb(0x83, 0xA5, 0x98)
GRUVBOX_PURPLE = Rgb(0xD3, 0x86, 0x9B)
GRUVBOX_AQUA = Rgb(0x8E, 0xC0, 0x7C)
GRUVBOX_ORANGE = Rgb(0xFE, 0x80, 0x19)
GRUVBOX_SELECTION = Rgb(0x50, 0x49, 0x45)


@dataclass(frozen=True)
class SyntaxPalette:
    """Colours used for each class of source token."""

    background: Color
    foreground: Color
    selection: Color
    comment: Color
    string: Color
    escape: Color
    constant: Color
    keyword: Color
    type_name: Color
    function: Color
    variable: Color
    support: Color
    tag: Color
    attribute: Color
    markup: Color
    invalid: Color
    operator: Color
    punctuation: Color
    namespace: Color
    property: Color
    macro_call: Color
    label: Color
    regex: Color
    link: Color
    doc_comment: Color
    list_marker: Color

    @classmethod
    def gruvbox_dark(cls) -> SyntaxPalette:
        """Warm palette on a dark grey background."""
        return cls(
            background=GRUVBOX_DARK_BG,
            foreground=GRUVBOX_LIGHT_FG,
            selection=GRUVBOX_SELECTION,
            comment=GRUVBOX_GRAY,
            string=GRUVBOX_GREEN,
            escape=GRUVBOX_ORANGE,
            constant=GRUVBOX_PURPLE,
            keyword=GRUVBOX_RED,
            type_name=GRUVBOX_YELLOW,
            function=GRUVBOX_GREEN,
            variable=GRUVBOX_BLUE,
            support=GRUVBOX_AQUA,
            tag=GRUVBOX_BLUE,
            attribute=GRUVBOX_AQUA,
            markup=GRUVBOX_YELLOW,
            invalid=GRUVBOX_RED,
            operator=GRUVBOX_ORANGE,
            punctuation=GRUVBOX_LIGHT_FG,
            namespace=GRUVBOX_BLUE,
            property=GRUVBOX_BLUE,
            macro_call=GRUVBOX_AQUA,
            label=GRUVBOX_PURPLE,
            regex=GRUVBOX_ORANGE,
            link=GRUVBOX_AQUA,
            doc_comment=GRUVBOX_GRAY,
            list_marker=GRUVBOX_ORANGE,
        )

    @classmethod
    def github_dark_on_matte(cls) -> SyntaxPalette:
        """Cool palette on a near-black background."""
        return cls(
            background=NIGHT_BLACK,
            foreground=GITHUB_DARK_FG,
            selection=CHARCOAL,
            comment=GITHUB_DARK_MUTED,
            string=GITHUB_DARK_STRING,
            escape=GITHUB_DARK_BRIGHT_ORANGE,
            constant=GITHUB_DARK_PURPLE,
            keyword=GITHUB_DARK_KEYWORD,
            type_name=GITHUB_DARK_ORANGE,
            function=GITHUB_DARK_ORANGE,
            variable=GITHUB_DARK_FG,
            support=GITHUB_DARK_ORANGE,
            tag=GITHUB_DARK_GREEN,
            attribute=GITHUB_DARK_PURPLE,
            markup=GITHUB_DARK_BLUE,
            invalid=GITHUB_DARK_RED,
            operator=GITHUB_DARK_KEYWORD,
            punctuation=GITHUB_DARK_FG,
            namespace=GITHUB_DARK_FG,
            property=GITHUB_DARK_LIGHT_BLUE,
            macro_call=GITHUB_DARK_PURPLE,
            label=GITHUB_DARK_ORANGE,
            regex=GITHUB_DARK_BRIGHT_ORANGE,
            link=GITHUB_DARK_BLUE,
            doc_comment=GITHUB_DARK_MUTED,
            list_marker=GITHUB_DARK_BRIGHT_ORANGE,
        )


@dataclass(frozen=True)
class Theme:
    """Colours for every part of the interface."""

    background: Color
    background_alt: Color
    border: Color
    border_active: Color
    text: Color
    muted: Color
    accent: Color
    added: Color
    added_bg: Color
    removed: Color
    removed_bg: Color
    selected: Color
    file_new: Color
    file_deleted: Color
    file_renamed: Color
    file_modified: Color
    line_number_fg: Color
    line_number_bg: Color
    context_bg: Color
    syntax: SyntaxPalette

    @classmethod
    def matte_box(cls) -> Theme:
        """The default earthy theme."""
        return cls(
            background=NIGHT_BLACK,
            background_alt=CHARCOAL,
            border=SLATE_GRAY,
            border_active=SAGE,
            text=SAND,
            muted=MIST_BLUE,
            accent=SAGE,
            added=MINT_GREEN,
            added_bg=DARK_OLIVE,
            removed=DUSTY_RED,
            removed_bg=DARK_MAROON,
            selected=CHARCOAL,
            file_new=MINT_GREEN,
            file_deleted=DUSTY_RED,
            file_renamed=AMBER,
            file_modified=SAGE,
            line_number_fg=COOL_GRAY,
            line_number_bg=DEEP_CHARCOAL,
            context_bg=NIGHT_BLACK,
            syntax=SyntaxPalette.gruvbox_dark(),
        )

    @classmethod
    def github_dark(cls) -> Theme:
        """A theme in the colours of a popular dark code-hosting style."""
        return cls(
            background=NIGHT_BLACK,
            background_alt=CHARCOAL,
            border=GITHUB_DARK_BORDER,
            border_active=GITHUB_DARK_BLUE,
            text=GITHUB_DARK_FG,
            muted=GITHUB_DARK_MUTED,
            accent=GITHUB_DARK_BLUE,
            added=GITHUB_DARK_GREEN,
            added_bg=GITHUB_DARK_ADDED_BG,
            removed=GITHUB_DARK_RED,
            removed_bg=GITHUB_DARK_REMOVED_BG,
            selected=CHARCOAL,
            file_new=GITHUB_DARK_GREEN,
            file_deleted=GITHUB_DARK_RED,
            file_renamed=GITHUB_DARK_ORANGE,
            file_modified=GITHUB_DARK_BLUE,
            line_number_fg=GITHUB_DARK_MUTED,
            line_number_bg=DEEP_CHARCOAL,
            context_bg=NIGHT_BLACK,
            syntax=SyntaxPalette.github_dark_on_matte(),
        )

    def base_style(self) -> Style:
        """Plain text on the theme background."""
        return Style(fg=self.text, bg=self.background)