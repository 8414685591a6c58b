# Task board: column status mapping and drag-and-drop reordering
#
# Components:
#   status.py    - Status enum, column name <-> status mapping
#   schema.py    - Board data model (Board, BoardList, BoardTask, ItemType)
#   ordering.py  - Position helpers (dense packing, moves, sortable ids)
#   reorder.py   - Drag state machine with optimistic commit and rollback
#   client.py    - HTTP persistence client for position updates
#   config.py    - YAML configuration and logging setup
#   errors.py    - Exception hierarchy
#   cli.py       - `taskboard` command line
