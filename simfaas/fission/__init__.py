"""
Fission emulator package.
"""
