from ephemeralpy.runtime.marker import Ephemeral, ephemeral

__all__ = ['Ephemeral', 'ephemeral']
