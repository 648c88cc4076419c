"""
Games module - Example payloads for the interpreter.

Each game has its own subpackage with:
- State model
- Effects and replacement effects
- Setup and scripted turns
"""
