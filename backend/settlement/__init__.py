"""Order timing and settlement engine for binary-option trades.

This package contains pure business logic with no I/O dependencies
(no database, price feed, or network access). Time is always passed in
explicitly or read through a Clock, so every calculation is
reproducible from its inputs.
"""
