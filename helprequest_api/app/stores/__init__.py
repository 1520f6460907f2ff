"""
Persistence layer.

Stores own the SQL for one table each and convert rows to schema
objects with explicit marshalling functions.  A store receives its
connection factory as a constructor argument.
"""
