"""
Services package - transport, workflow steps and the state machine
"""
