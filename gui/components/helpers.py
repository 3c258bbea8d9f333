"""
Helper classes for GUI
"""
from PyQt5.QtCore import QObject, pyqtSignal


class AlertClearHelper(QObject):
    """Moves alert-list clears requested from the browser console onto the GUI thread"""
    clear_requested = pyqtSignal()

    def __init__(self, target_method):
        super().__init__()
        self.clear_requested.connect(target_method)
