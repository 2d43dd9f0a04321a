"""When Is The Last Time - authentication backend."""
