"""Tunnels exposing locally served pages to the remote grid."""

from remote_browser_test.tunnel.base import (
    TunnelHandle,
    TunnelLauncher,
    TunnelLaunchError,
)
from remote_browser_test.tunnel.sauce_connect import (
    SauceConnectLauncher,
    SauceConnectTunnel,
)

__all__ = [
    "SauceConnectLauncher",
    "SauceConnectTunnel",
    "TunnelHandle",
    "TunnelLaunchError",
    "TunnelLauncher",
]
