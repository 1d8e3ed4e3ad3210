"""Credential Guard Meta information.
   Credential Guard encrypts third-party API keys before they reach
   the local settings store.
"""
__title__ = 'credential_guard'
__description__ = (
   'Credential Guard encrypts third-party API keys '
   'before they reach the local settings store.'
)
__version__ = '0.1.0'
__copyright__ = 'Copyright (c) 2026 Jesus Lara'
__author__ = 'Jesus Lara'
__author_email__ = 'jesuslarag@gmail.com'
__license__ = 'Apache-2.0'
