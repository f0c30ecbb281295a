"""
imagefx - client workflow for the remote image effect API.

Uploads a user image, submits a generation job that references it, polls the
job to completion and exposes the combined progress as a small state machine.
"""

__version__ = "1.0.0"
