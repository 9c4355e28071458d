"""
The run-time: values, and the interpreter that walks the syntax tree.
"""
