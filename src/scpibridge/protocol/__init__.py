"""
The SCPI protocol: framing of lines, tokenizing lines into commands and dispatching commands to an instrument.
"""
