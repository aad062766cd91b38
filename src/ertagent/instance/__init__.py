"""Emacs instance lifecycle and control channel."""

from ertagent.instance.channel import EmacsChannel, lisp_string, unquote_lisp_string
from ertagent.instance.lifecycle import InstanceHandle, InstanceManager

__all__ = ["EmacsChannel", "InstanceHandle", "InstanceManager", "lisp_string", "unquote_lisp_string"]
