#! /usr/bin/env python3

""" Two channels connected by an in-process pipe. The listener on the first
    channel doubles whatever it receives, printing the result for a plain
    notification and sending it back for a fetch request.
"""

import logging
import time

import msgchannel


def main():

    logging.basicConfig(level=logging.INFO)

    port1, port2 = msgchannel.pipe()

    channel1 = msgchannel.Channel()
    msgchannel.attach(channel1, port1)

    channel2 = msgchannel.Channel()
    msgchannel.attach(channel2, port2)

    def doubler(event):
        value = 2 * event.data
        if event.is_fetch():
            event.send(value)
        else:
            print({'val': value})

    channel1.on('test-event', doubler)

    channel2.send('test-event', 4)                      # prints {'val': 8}
    print(channel2.fetch('test-event', 6).result(1))    # prints 12

    time.sleep(0.1)
    port2.close()
    port1.close()


if __name__ == '__main__':
    main()

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
