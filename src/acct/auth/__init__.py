# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Account and session helpers.

This package provides:
- Account records and their JSON form (users)
- The credential store over the key-value storage (store)
- Password rules and optional argon2 hashing (passwords)
- The session guard deciding which views may render (session)
"""
