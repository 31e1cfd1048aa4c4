"""
Pretty output formatting for the CLI.

Colored headers, key/value lines, tables and recommendation listings for
`chartsense classify` and `chartsense describe`.
"""

import os

from colorama import Fore, Style


class PrettyOutput:
    """
    Terminal formatter used by every CLI command.

    All methods are static and print directly; the color scheme and symbols
    are class attributes so a command never hard-codes escape sequences.
    """

    # Color scheme
    PRIMARY = Fore.CYAN
    SUCCESS = Fore.GREEN
    WARNING = Fore.YELLOW
    ERROR = Fore.RED
    HEADER = Fore.WHITE + Style.BRIGHT
    DIM = Style.DIM
    RESET = Style.RESET_ALL

    # Symbols
    CHECK = "✓"
    CROSS = "✗"
    ARROW = "→"
    DOT = "•"
    WARN = "⚠"

    # Chart type glyphs for recommendation listings
    CHART_ICONS = {
        "bar": "▇",
        "line": "╱",
        "area": "◢",
        "pie": "◔",
        "histogram": "▁▃▅",
    }

    @staticmethod
    def get_terminal_width():
        """Get terminal width, default to 80 if cannot determine."""
        try:
            return os.get_terminal_size().columns
        except OSError:
            return 80

    @staticmethod
    def header(text, width=None):
        """Print a boxed major header."""
        if width is None:
            width = min(PrettyOutput.get_terminal_width(), 80)

        padding = (width - len(text) - 2) // 2
        line = "═" * width

        print(f"\n{PrettyOutput.PRIMARY}╔{line}╗")
        print(f"║{' ' * padding}{text}{' ' * (width - len(text) - padding)}║")
        print(f"╚{line}╝{PrettyOutput.RESET}\n")

    @staticmethod
    def section(text, width=None):
        """Print a section header between two rules."""
        if width is None:
            width = min(PrettyOutput.get_terminal_width(), 80)

        line = "─" * width
        print(f"\n{PrettyOutput.HEADER}{line}")
        print(f"{PrettyOutput.ARROW} {text}")
        print(f"{line}{PrettyOutput.RESET}\n")

    @staticmethod
    def error(message, indent=0):
        print(f"{' ' * indent}{PrettyOutput.ERROR}{PrettyOutput.CROSS}{PrettyOutput.RESET} {message}")

    @staticmethod
    def warning(message, indent=0):
        print(f"{' ' * indent}{PrettyOutput.WARNING}{PrettyOutput.WARN}{PrettyOutput.RESET} {message}")

    @staticmethod
    def key_value(key, value, indent=0, value_color=None):
        """Print 'key: value', optionally coloring the value."""
        spaces = " " * indent
        color = value_color or ""
        reset = PrettyOutput.RESET if value_color else ""
        print(f"{spaces}{PrettyOutput.DIM}{key}:{PrettyOutput.RESET} {color}{value}{reset}")

    @staticmethod
    def confidence_indicator(confidence, width=20):
        """
        Return a bar for a 0-99 confidence value.

        Args:
            confidence: Archetype confidence percentage
            width: Bar width in characters
        """
        filled = int(width * confidence / 100)
        empty = width - filled

        if confidence >= 60:
            color = Fore.GREEN
        elif confidence >= 30:
            color = Fore.YELLOW
        else:
            color = Fore.RED

        return f"{color}{'█' * filled}{PrettyOutput.DIM}{'░' * empty}{PrettyOutput.RESET} {confidence}%"

    @staticmethod
    def recommendation(rank, rec, indent=2):
        """
        Print one chart recommendation as a two-line entry.

        Args:
            rank: 1-based position in the list
            rec: ChartRecommendation
            indent: Indentation spaces
        """
        spaces = " " * indent
        icon = PrettyOutput.CHART_ICONS.get(rec.chart_type, PrettyOutput.DOT)
        print(
            f"{spaces}{PrettyOutput.PRIMARY}{rank:>2}.{PrettyOutput.RESET} "
            f"{icon} {PrettyOutput.HEADER}{rec.title}{PrettyOutput.RESET} "
            f"{PrettyOutput.DIM}[{rec.chart_type}, {rec.aggregation}, p={rec.priority}]{PrettyOutput.RESET}"
        )
        print(f"{spaces}    {PrettyOutput.DIM}{rec.description}{PrettyOutput.RESET}")

    @staticmethod
    def compact_table(headers, rows, col_widths=None):
        """Print a left-aligned table with a rule under the header."""
        if not col_widths:
            col_widths = [max(len(str(h)), max(len(str(r[i])) for r in rows) if rows else 0)
                          for i, h in enumerate(headers)]

        header_str = "  ".join(f"{h:<{col_widths[i]}}" for i, h in enumerate(headers))
        print(f"  {PrettyOutput.HEADER}{header_str}{PrettyOutput.RESET}")
        print(f"  {PrettyOutput.DIM}{'─' * len(header_str)}{PrettyOutput.RESET}")

        for row in rows:
            print("  " + "  ".join(f"{str(v):<{col_widths[i]}}" for i, v in enumerate(row)))

    @staticmethod
    def output_file(label, path, indent=2):
        print(f"{' ' * indent}{PrettyOutput.ARROW} {PrettyOutput.DIM}{label}:{PrettyOutput.RESET} {path}")

    @staticmethod
    def task_complete(message, duration=None):
        suffix = f" {PrettyOutput.DIM}({duration:.1f}s){PrettyOutput.RESET}" if duration is not None else ""
        print(f"{PrettyOutput.SUCCESS}{PrettyOutput.CHECK}{PrettyOutput.RESET} {message}{suffix}")

    @staticmethod
    def blank_line():
        print()
