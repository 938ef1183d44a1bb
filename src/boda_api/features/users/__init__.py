"""Account profile feature."""
