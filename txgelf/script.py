"""
Send one message to graylog from the command line.

For example::

    txgelf-send "disk almost full"
    txgelf-send --host graylog.example.com --connection lan "hello"
    txgelf-send --json '{"short_message": "hi", "_user": "bob"}'
"""
import json
import sys

from toolz.dicttoolz import merge

from twisted.internet import task
from twisted.python import usage

from txgelf.client import GelfClient
from txgelf.config import options_from_path


class Options(usage.Options):
    """
    Options for txgelf-send.
    """
    synopsis = 'Usage: txgelf-send [options] MESSAGE'

    optParameters = [
        ["host", "H", None, "graylog server host name or IP address."],
        ["port", "p", None, "graylog server UDP port.", int],
        ["connection", "C", None, "lan or wan, decides the chunk size."],
        ["config", "c", None, "path to a JSON configuration file."],
        ["facility", "f", None, "facility of the message."],
    ]

    optFlags = [
        ["json", "j", "MESSAGE is a JSON object of GELF fields."],
    ]

    def parseArgs(self, message):
        self['message'] = message

    def postOptions(self):
        """
        Merge the command line arguments over the configuration file and
        build the event to send.
        """
        if self['connection'] not in (None, 'lan', 'wan'):
            raise usage.UsageError("--connection must be lan or wan")

        file_options = {}
        if self['config']:
            try:
                file_options = options_from_path(self['config'])
            except (IOError, ValueError) as e:
                raise usage.UsageError(str(e))
        self['gelf'] = merge(file_options, {
            k: v for k, v in [('graylogHostname', self['host']),
                              ('graylogPort', self['port']),
                              ('connection', self['connection'])]
            if v is not None})

        if self['json']:
            try:
                event = json.loads(self['message'])
            except ValueError as e:
                raise usage.UsageError("MESSAGE is not JSON: {}".format(e))
            if not isinstance(event, dict):
                raise usage.UsageError("MESSAGE must be a JSON object")
        else:
            event = {'short_message': self['message']}
        if self['facility']:
            event['facility'] = self['facility']
        self['event'] = event


def send(reactor, options, out=None):
    """
    Send the event described by parsed `options`.

    :param out: Stream failures are reported to, stderr by default.
    :return: Deferred that fires with the exit status.
    """
    if out is None:
        out = sys.stderr
    client = GelfClient(options['gelf'], reactor=reactor)
    client.open()
    result = {}

    def done(error):
        result['error'] = error

    d = client.log(options['event'], callback=done)
    d.addCallback(lambda _: client.close())

    def report(_):
        if result['error'] is not None:
            out.write('Failed to send message: {}\n'.format(result['error']))
            return 1
        return 0

    return d.addCallback(report)


def main(reactor, *argv):
    """
    Entry point run by :func:`twisted.internet.task.react`.
    """
    options = Options()
    try:
        options.parseOptions(argv)
    except usage.UsageError as e:
        sys.stderr.write('{}\n{}\n'.format(options, e))
        raise SystemExit(2)

    def exit_with(status):
        if status:
            raise SystemExit(status)

    return send(reactor, options).addCallback(exit_with)


def run():
    """
    Console script entry point.
    """
    task.react(main, sys.argv[1:])
