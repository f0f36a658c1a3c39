# Services package init
"""
KeepNotes Backend — Services Layer
====================================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).

Service Inventory:
    - NoteService: Owner-scoped note CRUD, archive toggle, soft delete and
      the active / archived / trash / reminders listings
"""
