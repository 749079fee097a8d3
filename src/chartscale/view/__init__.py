"""
The VIEW layer adapts pyqtgraph widgets to the controller interfaces.
"""
