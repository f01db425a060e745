# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Web file manager for S3-compatible buckets with a built-in SigV4 signer."""
