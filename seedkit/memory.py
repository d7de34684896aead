# Copyright (c) 2026 Signer — MIT License

"""Scoped handling of sensitive buffers.

Key material that passes through seedkit lives in bytearrays so it can be
overwritten in place. secure_buffer() ties the wipe to a with-block: the
buffer is zeroed on every exit path, including exceptions.

    with secure_buffer(64) as buf:
        buf[:] = stretch(...)
        ...                       # buf is all zeros after the block

Python's bytes and int objects are immutable and cannot be wiped; values
converted out of a secure buffer are the caller's responsibility.
"""

import contextlib


def wipe(buffer):
    """Overwrite a bytearray (or memoryview) with zeros in place."""
    if buffer is None:
        return
    view = memoryview(buffer)
    if view.readonly:
        raise TypeError("cannot wipe a read-only buffer")
    view.cast("B")[:] = bytes(view.nbytes)


@contextlib.contextmanager
def secure_buffer(initial):
    """Yield a bytearray that is wiped when the block exits.

    Args:
        initial: Either a size in bytes (zero-filled buffer) or a bytes-like
                 object whose contents are copied into the buffer.
    """
    buf = bytearray(initial)
    try:
        yield buf
    finally:
        wipe(buf)


@contextlib.contextmanager
def wiping(*buffers):
    """Wipe already-allocated bytearrays when the block exits."""
    try:
        yield buffers[0] if len(buffers) == 1 else buffers
    finally:
        for b in buffers:
            wipe(b)
