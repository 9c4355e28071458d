"""
Lets `python -m lox program.lox` work the same as the `lox` command.
"""
from lox.cmdline import main

main()
