import itertools
import pytest

import msgchannel


_flush_ids = itertools.count()


def _flush(sender, receiver, timeout=1):
    """ Round-trip a fetch from *sender* to *receiver*. Delivery is serial
        and in order, so once this returns every envelope *sender* sent
        beforehand has been fully dispatched by *receiver*.
    """

    name = 'flush-%d' % (next(_flush_ids))
    receiver.on(name, lambda event: event.send())
    sender.fetch(name).result(timeout)


@pytest.fixture
def flush():
    return _flush


@pytest.fixture
def ports():

    port1, port2 = msgchannel.pipe()

    yield port1, port2

    port1.close()
    port2.close()


@pytest.fixture
def channels(ports):
    """ Two channels connected through an in-memory pipe, the same way two
        independent endpoints would be wired to either end of a transport.
    """

    port1, port2 = ports

    channel1 = msgchannel.Channel()
    msgchannel.attach(channel1, port1)

    channel2 = msgchannel.Channel()
    msgchannel.attach(channel2, port2)

    yield channel1, channel2

    channel1.close()
    channel2.close()


@pytest.fixture
def recorded():
    """ A channel whose outbound envelopes are collected in a list rather
        than sent anywhere.
    """

    sent = list()
    channel = msgchannel.Channel()
    channel.register_outbound(sent.append)

    yield channel, sent

    channel.close()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
