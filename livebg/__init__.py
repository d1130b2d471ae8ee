"""Client, settings and colour helpers for a live wallpaper daemon's control socket."""

__version__ = "0.1.0"
__all__ = ["colors", "protocol", "settings", "uitools", "wallpapers"]