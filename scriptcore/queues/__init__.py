"""Queue scheduling: ordered entries, instant splicing and wait-for holds."""
