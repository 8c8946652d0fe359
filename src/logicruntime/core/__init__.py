"""logicruntime.core

Interpreter facade, host-facing state objects, value cache and configuration.
"""
