"""Local persistence package.

Module split:
    - `json_store`: atomic JSON file read/write helpers.
    - `settings_store`: credentials and logical model selections.
    - `history_store`: completed reconstruction records, most-recent first.
"""
