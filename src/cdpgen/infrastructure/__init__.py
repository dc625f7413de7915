"""Infrastructure: schema acquisition, rendering, and file output.

Infrastructure may import from the domain and compiler layers, never from services,
commands, or output.
"""
