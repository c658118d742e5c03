"""PySide6 front-end for piforge.

Start it with ``piforge-gui`` or ``piforge_gui.app.run_gui()``.
"""
