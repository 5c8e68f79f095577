"""Version store, download queue, sync lock and download workers."""
