"""Optional PyQt6 editor for the accordion tiler.

Requires the ``ui`` extra (PyQt6).
"""

import sys

from ..config_manager import ConfigManager


def run_editor(config_manager: ConfigManager | None = None) -> int:
    """Launch the editor window and block until it closes."""
    from PyQt6.QtWidgets import QApplication

    from .editor_window import EditorWindow

    app = QApplication(sys.argv)
    app.setApplicationDisplayName("Accordion Tiler")
    app.setApplicationName("AccordionTiler")

    window = EditorWindow(config_manager or ConfigManager())
    window.show()

    return app.exec()


__all__ = ["run_editor"]
