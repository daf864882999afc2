import contextlib
import sys
from types import ModuleType
from pathlib import Path


class _Widget:
    """Stand-in base for Tk widget classes; accepts and records any options."""

    def __init__(self, *args, **kwargs):
        self.args = args
        self.options = dict(kwargs)

    def __getattr__(self, name):
        # Any widget method (pack, bind, configure, ...) is a no-op
        def _noop(*args, **kwargs):
            return None

        return _noop


def _install_tkinter_mocks() -> None:
    # Build proper module objects so imports like `from tkinter import ttk` work
    tk_mod = ModuleType("tkinter")

    for name in (
        "Text",
        "Frame",
        "Canvas",
        "Scrollbar",
        "Listbox",
        "Button",
        "Label",
        "PanedWindow",
        "Tk",
        "Toplevel",
    ):
        setattr(tk_mod, name, type(name, (_Widget,), {}))
    tk_mod.END = "end"
    tk_mod.BOTH = "both"
    tk_mod.X = "x"
    tk_mod.Y = "y"
    tk_mod.LEFT = "left"
    tk_mod.RIGHT = "right"
    tk_mod.TOP = "top"
    tk_mod.BOTTOM = "bottom"
    tk_mod.VERTICAL = "vertical"
    tk_mod.HORIZONTAL = "horizontal"
    tk_mod.SINGLE = "single"

    messagebox_mod = ModuleType("tkinter.messagebox")
    simpledialog_mod = ModuleType("tkinter.simpledialog")
    ttk_mod = ModuleType("tkinter.ttk")
    ttk_mod.Notebook = type("Notebook", (_Widget,), {})

    tk_mod.messagebox = messagebox_mod
    tk_mod.simpledialog = simpledialog_mod
    tk_mod.ttk = ttk_mod

    # Register modules
    sys.modules["tkinter"] = tk_mod
    sys.modules["tkinter.messagebox"] = messagebox_mod
    sys.modules["tkinter.simpledialog"] = simpledialog_mod
    sys.modules["tkinter.ttk"] = ttk_mod

    # tkinterweb subclasses real Tk widgets, so it is replaced along with tkinter
    tkinterweb_mod = ModuleType("tkinterweb")
    tkinterweb_mod.HtmlFrame = type("HtmlFrame", (_Widget,), {})
    sys.modules["tkinterweb"] = tkinterweb_mod


def pytest_configure(config):
    # Ensure repository root is importable (so 'notesplus' and 'main' work)
    with contextlib.suppress(Exception):
        root = Path(__file__).resolve().parents[1]
        sys.path.insert(0, str(root))
    _install_tkinter_mocks()
