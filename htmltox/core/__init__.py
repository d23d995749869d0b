"""Core: ports, models, executor and converters. No ctypes here."""
