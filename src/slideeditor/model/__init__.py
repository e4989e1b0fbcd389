"""
The MODEL layer contains pure data structures.
It has NO knowledge of the GUI (Qt) or of drag-and-drop wiring.
It deals with the document tree, its defaults, the editor snapshot and I/O.
"""
