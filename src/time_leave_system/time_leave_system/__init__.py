"""Time & Leave System package.

This package is organized by feature modules (employees, time_entries, leave,
aggregation, notifications) around a pure accounting engine, with thin Flask
controllers and service/repository layers on top.
"""
