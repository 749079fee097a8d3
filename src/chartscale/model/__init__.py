"""
The MODEL layer contains value types and data sources.
It has NO knowledge of the scheduling or the host widgets.
It deals with Geometry, Padding, Options and Data.
"""
