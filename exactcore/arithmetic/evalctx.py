"""Evaluation context information, shared across arithmetics."""

import logging

import gmpy2 as gmp
import numpy as np

from ..numeric import gmpmath


logger = logging.getLogger(__name__)


int8_synonyms = {'int8', 'int8_t', 'i8', 'char', 'schar'}
int16_synonyms = {'int16', 'int16_t', 'i16', 'short'}
int32_synonyms = {'int32', 'int32_t', 'i32', 'int'}
int64_synonyms = {'int64', 'int64_t', 'i64', 'long', 'longlong'}
uint8_synonyms = {'uint8', 'uint8_t', 'u8', 'uchar', 'byte'}
uint16_synonyms = {'uint16', 'uint16_t', 'u16', 'ushort'}
uint32_synonyms = {'uint32', 'uint32_t', 'u32', 'uint'}
uint64_synonyms = {'uint64', 'uint64_t', 'u64', 'ulong', 'ulonglong'}
isize_synonyms = {'isize', 'intp', 'ssize_t', 'ptrdiff_t'}
usize_synonyms = {'usize', 'uintp', 'size_t'}
bigint_synonyms = {'bigint', 'mpz', 'integer', 'arbitrary'}

integer_types = {}
integer_types.update((k, np.int8) for k in int8_synonyms)
integer_types.update((k, np.int16) for k in int16_synonyms)
integer_types.update((k, np.int32) for k in int32_synonyms)
integer_types.update((k, np.int64) for k in int64_synonyms)
integer_types.update((k, np.uint8) for k in uint8_synonyms)
integer_types.update((k, np.uint16) for k in uint16_synonyms)
integer_types.update((k, np.uint32) for k in uint32_synonyms)
integer_types.update((k, np.uint64) for k in uint64_synonyms)
integer_types.update((k, np.intp) for k in isize_synonyms)
integer_types.update((k, np.uintp) for k in usize_synonyms)
integer_types.update((k, type(gmp.mpz(0))) for k in bigint_synonyms)

def integer_type(name):
    """Look up the value type for an integer width by (case insensitive) name."""
    try:
        return integer_types[str(name).lower()]
    except KeyError:
        raise ValueError('unsupported integer type {}'.format(repr(name)))


def check_log2_denom(log2_denom):
    if isinstance(log2_denom, str):
        try:
            log2_denom = int(log2_denom)
        except ValueError:
            raise ValueError('unsupported precision {}'.format(repr(log2_denom)))
    if not gmpmath.is_integer(log2_denom) or log2_denom < 0:
        raise ValueError('precision must be a non-negative integer, got {}'.format(repr(log2_denom)))
    return int(log2_denom)


class DyadicCtx(object):
    """Context for dyadic interval arithmetic.
    The precision is the exponent n of the shared denominator 2**n used
    when an interval is constructed without an explicit denominator.
    """

    log2_denom = 64

    def __init__(self, props=None, log2_denom=None):
        init_log2_denom = self.log2_denom

        self.props = {}
        if props:
            if 'precision' in props:
                init_log2_denom = check_log2_denom(props['precision'])
            self.props.update(props)

        # arguments are allowed to override properties
        if log2_denom is not None:
            init_log2_denom = check_log2_denom(log2_denom)

        self.log2_denom = init_log2_denom

    def let(self, props=None):
        """Create a new context, updated with any provided properties."""
        cls = type(self)
        newctx = cls.__new__(cls)
        newctx.log2_denom = self.log2_denom

        if props:
            newctx.props = self.props.copy()
            if 'precision' in props:
                newctx.log2_denom = check_log2_denom(props['precision'])
            newctx.props.update(props)
        else:
            # share the dictionary
            newctx.props = self.props

        return newctx

    def __repr__(self):
        args = ['log2_denom=' + repr(self.log2_denom)]
        if len(self.props) > 0:
            args.append('props=' + repr(self.props))
        return '{}({})'.format(type(self).__name__, ', '.join(args))

    def __eq__(self, other):
        if isinstance(other, DyadicCtx):
            return self.log2_denom == other.log2_denom
        return NotImplemented

    def __hash__(self):
        return hash((DyadicCtx, self.log2_denom))


used_ctxs = {}
def dyadic_ctx(log2_denom=None):
    """Shared, cached context for a given precision."""
    if log2_denom is None:
        log2_denom = DyadicCtx.log2_denom
    else:
        log2_denom = check_log2_denom(log2_denom)
    try:
        return used_ctxs[log2_denom]
    except KeyError:
        ctx = DyadicCtx(log2_denom=log2_denom)
        logger.debug('created %r', ctx)
        used_ctxs[log2_denom] = ctx
        return ctx
