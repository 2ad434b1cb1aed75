# SPDX-License-Identifier: Apache-2.0

"""
WSGI entry point exposing ``app``.
"""

import os

from .app import create_app

app = create_app()

if __name__ == "__main__":
    app.run(debug=False, host="0.0.0.0", port=int(os.environ.get("PORT", 3030)))
