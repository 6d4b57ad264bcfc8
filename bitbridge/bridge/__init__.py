"""Correlation and dispatch engine between the menu and the remote host."""

from bitbridge.bridge.actions import Action
from bitbridge.bridge.dispatcher import ActionDispatcher
from bitbridge.bridge.interaction import InteractionDriver
from bitbridge.bridge.pending import PendingEntry, PendingRequestTable
from bitbridge.bridge.processor import Outcome, ResponseProcessor, render
from bitbridge.bridge.resume import ResumeSignal
from bitbridge.bridge.session import BridgeSession

__all__ = [
    "Action",
    "ActionDispatcher",
    "BridgeSession",
    "InteractionDriver",
    "Outcome",
    "PendingEntry",
    "PendingRequestTable",
    "ResponseProcessor",
    "ResumeSignal",
    "render",
]
