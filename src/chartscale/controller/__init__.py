"""
The CONTROLLER layer decides which content range a host should show and when.
It talks to the host only through the `ScaleHost` interface.
"""
