""" Configuration for :class:`msgchannel.channel.Channel` instances. The
    defaults can be overridden per channel by passing a
    :class:`ChannelOptions` instance, or process-wide via environment
    variables read by :func:`ChannelOptions.from_environment`.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Optional


FETCH_TIMEOUT_VARIABLE = 'MSGCHANNEL_FETCH_TIMEOUT'


def check_timeout(timeout) -> Optional[float]:
    """ Validate a fetch timeout, expressed in seconds. None, zero and
        infinity all mean "wait forever", and are normalized to None. Anything that is not
        a non-negative number raises ValueError.
    """

    if timeout is None:
        return None

    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
        raise ValueError('fetch timeout must be a number of seconds, not %r' % (timeout,))

    if timeout != timeout or timeout < 0:
        raise ValueError('fetch timeout must be non-negative: %r' % (timeout,))

    if timeout == 0 or math.isinf(timeout):
        return None

    return timeout


@dataclass
class ChannelOptions:
    """ Tunable behavior of a channel.

        :ivar fetch_timeout: seconds before an unanswered fetch is rejected,
            used when :func:`Channel.fetch` is called without an explicit
            timeout. None waits forever.
    """

    fetch_timeout: Optional[float] = None

    def __post_init__(self):
        self.fetch_timeout = check_timeout(self.fetch_timeout)

    @classmethod
    def from_environment(cls, environ=None) -> "ChannelOptions":
        """ Build options from environment variables; unset or empty
            variables leave the default in place.
        """

        if environ is None:
            environ = os.environ

        timeout = environ.get(FETCH_TIMEOUT_VARIABLE, '').strip()

        if timeout == '':
            timeout = None
        else:
            try:
                timeout = float(timeout)
            except ValueError:
                raise ValueError('%s must be a number of seconds: %r' % (FETCH_TIMEOUT_VARIABLE, timeout))

        return cls(fetch_timeout=timeout)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
