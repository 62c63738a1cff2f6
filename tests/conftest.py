import pytest
import socket
import threading
import time


class Router:
    """ A scripted stand-in for the data-router. It accepts one connection
        on an ephemeral localhost port; every chunk received from the client
        is recorded, and answered with the next entry in *responses*, if any.
        An entry of None sends nothing; a tuple is sent one segment at a
        time, with a short pause in between. With *hangup* set the server closes
        the connection after the last response.
    """

    def __init__(self, responses, hangup=False):

        self.responses = list(responses)
        self.hangup = hangup
        self.received = list()

        self.listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self.listener.bind(('127.0.0.1', 0))
        self.listener.listen(1)
        self.listener.settimeout(10)
        self.port = self.listener.getsockname()[1]

        self.thread = threading.Thread(target=self.run)
        self.thread.daemon = True
        self.thread.start()


    def run(self):

        try:
            connection, _address = self.listener.accept()
        except OSError:
            return

        connection.settimeout(10)

        with connection:
            while True:
                try:
                    data = connection.recv(4096)
                except OSError:
                    break

                if data == b'':
                    break

                self.received.append(data)

                if len(self.responses) == 0:
                    continue

                response = self.responses.pop(0)
                if isinstance(response, tuple):
                    for segment in response:
                        connection.sendall(segment)
                        time.sleep(0.05)
                elif response is not None:
                    connection.sendall(response)

                if len(self.responses) == 0 and self.hangup == True:
                    connection.shutdown(socket.SHUT_RDWR)
                    break


    def join(self, timeout=5):
        self.thread.join(timeout)


    def stop(self):
        self.listener.close()
        self.join()



@pytest.fixture
def router():
    """ Factory fixture: call it with the scripted responses to start a
        :class:`Router`, and use its *port* to connect.
    """

    routers = list()

    def start(*responses, hangup=False):
        instance = Router(responses, hangup=hangup)
        routers.append(instance)
        return instance

    yield start

    for instance in routers:
        instance.stop()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
