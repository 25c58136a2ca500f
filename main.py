# Copyright (c) 2025 zvuk-dl and contributors. All rights reserved.
# Licensed under the MIT license. See LICENSE file in the project root for details.

"""Main entry point for the zvuk-dl application."""

from zvukdl.cli import main

if __name__ == "__main__":
    main()
