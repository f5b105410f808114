"""
Console scripts wrapping tasks, generated from docopt usage strings.
"""
