""" The :class:`Channel` multiplexes named notifications and correlated
    fetch requests over a single duplex transport. The transport is an
    external collaborator: it feeds inbound envelopes, one at a time, to the
    handler returned by :func:`Channel.inbound_handler`, and it accepts
    outbound envelopes via the callback installed with
    :func:`Channel.register_outbound`.
"""

import concurrent.futures
import functools
import logging
import threading
import traceback

from . import config
from . import errors
from .protocol import factory
from .protocol import fields
from .protocol.message import Envelope, ErrorInfo, is_id

logger = logging.getLogger(__name__)


class Registration:
    """ Handle returned by :func:`Channel.on`. Calling :func:`remove`
        unregisters the callback; removing it a second time is a no-op.
    """

    def __init__(self, channel, name, callback):

        self.channel = channel
        self.name = name
        self.callback = callback


    def __repr__(self):
        return "Registration(name=%r, callback=%r)" % (self.name, self.callback)


    def remove(self):
        """ Remove this callback from the listener group it was added to.
            If the same callback was registered more than once under the
            same name, the most recently registered occurrence is removed.
        """

        self.channel._unregister(self.name, self.callback)


# end of class Registration



class PendingFetch:
    """ One in-flight fetch request: the correlation *id*, the
        :class:`concurrent.futures.Future` handed back to the caller, and the
        timeout timer, if any. A :class:`PendingFetch` is only ever settled
        by whoever removed it from the channel's pending table, so it is
        settled at most once.
    """

    def __init__(self, id, future):

        self.id = id
        self.future = future
        self.timer = None


    def arm(self, timeout, expire):
        """ Start a timer that invokes *expire* with this request's id after
            *timeout* seconds.
        """

        timer = threading.Timer(timeout, expire, args=(self.id,))
        timer.daemon = True
        self.timer = timer
        timer.start()


    def disarm(self):

        timer = self.timer

        if timer is not None:
            timer.cancel()


    def resolve(self, data):

        self.disarm()

        # The caller may have cancelled the future; that takes precedence.

        try:
            self.future.set_result(data)
        except concurrent.futures.InvalidStateError:
            pass


    def reject(self, exception):

        self.disarm()

        try:
            self.future.set_exception(exception)
        except concurrent.futures.InvalidStateError:
            pass


# end of class PendingFetch



class Channel:
    """ One endpoint of a point-to-point messaging channel.

        Listeners are registered by name with :func:`on`; the peer reaches
        them with :func:`send` (fire-and-forget) or :func:`fetch` (a request
        that expects exactly one response or rejection). Every fetch is
        assigned a correlation id from a per-channel counter that starts at
        zero and only ever increases.

        An exception raised by a listener while handling a fetch request is
        sent back to the peer as a rejection. An exception raised while
        handling a plain notification is passed to :func:`callback_error`.
        Either way it never reaches the transport. If a replacement
        :func:`callback_error` raises, that exception propagates to whoever
        invoked the inbound handler.

        The *callback_error* and *unhandled* arguments replace the default
        hooks of the same name; they can also be assigned directly on the
        instance at any time. The *options* argument is a
        :class:`msgchannel.config.ChannelOptions` instance.
    """

    def __init__(self, callback_error=None, unhandled=None, options=None):

        if options is None:
            options = config.ChannelOptions()

        self.options = options

        if callback_error is not None:
            if callable(callback_error):
                self.callback_error = callback_error
            else:
                raise TypeError('callback_error must be callable')

        if unhandled is not None:
            if callable(unhandled):
                self.unhandled = unhandled
            else:
                raise TypeError('unhandled must be callable')

        self._lock = threading.Lock()
        self._listeners = dict()
        self._pending = dict()
        self._next_id = 0
        self._outbound = None
        self._closed = False

        # Keep one bound method around so that inbound_handler() always
        # returns the same object.

        self._inbound = self._incoming


    def __enter__(self):
        return self


    def __exit__(self, *exc_info):
        self.close()


    def __repr__(self):
        return "Channel(next_id=%d, pending=%d, closed=%r)" % (self._next_id, len(self._pending), self._closed)


    @property
    def closed(self):
        return self._closed


    @property
    def next_id(self):
        """ The correlation id the next :func:`fetch` will use.
        """

        return self._next_id


    @property
    def pending(self):
        """ The number of fetch requests still awaiting a response.
        """

        return len(self._pending)


    def listeners(self, name):
        """ Return the callbacks registered for *name*, in invocation order.
        """

        with self._lock:
            try:
                callbacks = self._listeners[name]
            except KeyError:
                return tuple()

            return tuple(callbacks)


    def callback_error(self, error):
        """ Invoked for any exception raised by a listener callback handling
            a notification, where there is no peer waiting to be told about
            it. The default logs the exception with its traceback.
        """

        logger.error("listener callback raised %s: %s", type(error).__name__, error, exc_info=error)


    def unhandled(self, envelope, reason):
        """ Invoked for every inbound envelope that is dropped: a response
            whose request is no longer pending, or an event nobody is
            listening for. *reason* is one of the strings in
            :mod:`msgchannel.protocol.fields`. The default logs at debug level.
        """

        logger.debug("dropped envelope (%s): id=%r name=%r", reason, envelope.id, envelope.name)


    def register_outbound(self, callback):
        """ Register the *callback* used to send envelopes to the peer. The
            callback receives one argument per envelope, the dictionary
            form described by :func:`Envelope.to_dict`.
        """

        if callable(callback):
            pass
        else:
            raise TypeError('outbound callback must be callable')

        self._outbound = callback


    def post_message(self, envelope):
        """ Send an :class:`Envelope`, or its dictionary form, directly to
            the peer. Without a registered outbound callback the envelope is
            dropped with a warning.
        """

        if isinstance(envelope, Envelope):
            envelope = envelope.to_dict()

        if self._closed:
            logger.debug("channel is closed, dropping outbound envelope: %r", envelope)
            return

        outbound = self._outbound

        if outbound is None:
            logger.warning("no outbound callback registered, dropping envelope %r; register one with register_outbound()", envelope)
            return

        outbound(envelope)


    def inbound_handler(self):
        """ Return the function the transport should call for each inbound
            envelope. The same function is returned every time.
        """

        return self._inbound


    def _incoming(self, envelope):
        """ Process one inbound envelope: settle the matching fetch request
            for a response or rejection, otherwise dispatch an
            :class:`Event` to the listeners registered under its name.
        """

        envelope = Envelope.from_dict(envelope)

        if self._closed:
            logger.debug("channel is closed, dropping inbound envelope: id=%r name=%r", envelope.id, envelope.name)
            return

        if envelope.is_response():
            self._settle(envelope)
        else:
            self._dispatch(envelope)


    def _settle(self, envelope):

        with self._lock:
            pending = self._pending.pop(envelope.id, None)

        if pending is None:
            self.unhandled(envelope, fields.UNMATCHED_RESPONSE)
            return

        if envelope.is_rejection():
            error = envelope.error
            pending.reject(errors.RemoteError(error.message, error.kind, error.debug))
        else:
            pending.resolve(envelope.data)


    def _dispatch(self, envelope):

        with self._lock:
            try:
                callbacks = tuple(self._listeners[envelope.name])
            except KeyError:
                callbacks = tuple()

        if len(callbacks) == 0:
            self.unhandled(envelope, fields.NO_LISTENER)
            return

        event = Event(self, envelope.id, envelope.name, envelope.data, envelope.options)

        for callback in callbacks:
            try:
                callback(event)
            except Exception as error:
                if event.is_fetch():
                    self._reject_quietly(event, error, traceback.format_exc())
                else:
                    self.callback_error(error)


    def _reject_quietly(self, event, error, debug):
        """ Send a listener's exception back to the peer. If the rejection
            itself cannot be sent, log it; the remaining listeners still run.
        """

        try:
            event.reject(error, debug)
        except Exception:
            logger.exception("could not send rejection for fetch id=%r name=%r", event.id, event.name)


    def on(self, name, callback):
        """ Invoke *callback* with an :class:`Event` every time the peer
            sends or fetches *name*. Several callbacks may share a name;
            they are invoked in the order they were registered. Returns a
            :class:`Registration`; call its :func:`Registration.remove`
            method to unregister.
        """

        if isinstance(name, str):
            pass
        else:
            raise TypeError('listener name must be a string, not ' + type(name).__name__)

        if callable(callback):
            pass
        else:
            raise TypeError('callback must be callable')

        with self._lock:
            try:
                callbacks = self._listeners[name]
            except KeyError:
                callbacks = list()
                self._listeners[name] = callbacks

            callbacks.append(callback)

        return Registration(self, name, callback)


    def _unregister(self, name, callback):

        with self._lock:
            try:
                callbacks = self._listeners[name]
            except KeyError:
                return

            for index in range(len(callbacks) - 1, -1, -1):
                if callbacks[index] == callback:
                    del callbacks[index]
                    break


    def send(self, name, data=None):
        """ Send a notification to the peer's *name* listeners. Nothing is
            returned and nothing comes back.
        """

        self._check_name(name)
        self._check_open()

        self.post_message(factory.notification(name, data))


    def fetch(self, name, data=None, timeout=None):
        """ Send a request to the peer's *name* listeners and return a
            :class:`concurrent.futures.Future` for the response. The future
            raises :class:`msgchannel.errors.RemoteError` if the peer rejects
            the request, and :class:`msgchannel.errors.FetchTimeout` if no
            response arrives within *timeout* seconds.

            If *timeout* is None the channel's configured default applies;
            zero means no timeout. Cancelling the future abandons the
            request; a response that arrives afterwards is dropped.
        """

        self._check_name(name)

        if timeout is None:
            timeout = self.options.fetch_timeout
        else:
            timeout = config.check_timeout(timeout)

        future = concurrent.futures.Future()

        with self._lock:
            if self._closed:
                raise errors.ChannelClosed('cannot fetch on a closed channel')

            id = self._next_id
            self._next_id += 1

            pending = PendingFetch(id, future)
            self._pending[id] = pending

        # The timer is armed before the request goes out, because a
        # synchronous transport can deliver the response before post_message()
        # returns.

        if timeout is not None:
            pending.arm(timeout, self._expire)

        future.add_done_callback(functools.partial(self._fetch_done, id))

        try:
            self.post_message(factory.request(id, name, data, timeout))
        except Exception:
            self._discard(id)
            pending.disarm()
            raise

        return future


    def _expire(self, id):

        pending = self._discard(id)

        if pending is None:
            # The response got here first.
            return

        timeout = pending.timer.interval if pending.timer is not None else None
        pending.reject(errors.FetchTimeout('Timed out after %s seconds.' % (timeout,)))


    def _fetch_done(self, id, future):

        if future.cancelled():
            pending = self._discard(id)
            if pending is not None:
                pending.disarm()


    def _discard(self, id):
        """ Remove and return the pending entry for *id*, or None if it is
            already gone.
        """

        with self._lock:
            return self._pending.pop(id, None)


    def _check_name(self, name):

        if isinstance(name, str):
            pass
        else:
            raise TypeError('event name must be a string, not ' + type(name).__name__)


    def _check_open(self):

        if self._closed:
            raise errors.ChannelClosed('channel is closed')


    def close(self):
        """ Reject every pending fetch request with
            :class:`msgchannel.errors.ChannelClosed` and remove all listeners.
            Subsequent :func:`send` and :func:`fetch` calls raise, and
            inbound envelopes are dropped. Closing twice is harmless.
        """

        with self._lock:
            if self._closed:
                return

            self._closed = True

            pending = list(self._pending.values())
            self._pending.clear()
            self._listeners.clear()

        for entry in pending:
            entry.reject(errors.ChannelClosed('channel closed while awaiting a response'))


# end of class Channel



class Event:
    """ What a listener callback receives for one inbound notification or
        request. *options* is always a dictionary, empty for notifications.

        :ivar channel: The :class:`Channel` the event arrived on.
    """

    def __init__(self, channel, id, name, data, options=None):

        if options is None:
            options = dict()

        self.channel = channel
        self.id = id
        self.name = name
        self.data = data
        self.options = options


    def __repr__(self):
        return "Event(id=%r, name=%r, data=%r)" % (self.id, self.name, self.data)


    @property
    def timeout(self):
        """ The timeout the requester attached to this fetch, if any.
        """

        return factory.options_timeout(self.options)


    def is_fetch(self):
        """ True if the peer issued a fetch and is waiting for an answer,
            False for a plain notification.
        """

        return is_id(self.id)


    def send(self, data=None):
        """ Answer the fetch request with *data*. For a notification this
            sends an envelope the peer has no use for, and it is dropped.
        """

        self.channel.post_message(factory.response(self.id, data))


    def reject(self, error, debug=None):
        """ Answer the fetch request with an error; the peer's future raises
            :class:`msgchannel.errors.RemoteError` with the same kind and
            message. *error* is an exception or a plain message string.
        """

        if isinstance(error, BaseException):
            error = ErrorInfo.from_exception(error, debug)
        else:
            error = ErrorInfo(fields.KIND_ERROR, str(error), debug)

        self.channel.post_message(factory.rejection(self.id, error))


# end of class Event


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
