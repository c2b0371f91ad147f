import json
import logging
import time

import requests

from .utils import parse_json

log = logging.getLogger(__name__)

MIME_TYPE_JSON = 'application/json'


def join_url(base_url, path):
    """
    Returns ``path`` unchanged if it is an absolute URL, otherwise appends it to ``base_url``.
    """
    if path and path.startswith(('http://', 'https://')):
        return path
    if not path:
        return base_url
    return '{}/{}'.format(base_url.rstrip('/'), path.lstrip('/'))


class Request(object):
    """
    Interface for the HTTP transport used by a :class:`gdapi.Client`. The class is chosen with the ``request_class``
    option.

    :param client: the client the transport belongs to
    :param str base_url: URL that relative request paths are resolved against
    :param options: client options
    """

    def __init__(self, client, base_url, options):
        self.client = client
        self.base_url = base_url
        self.options = options
        self.meta = {}

    def set_auth(self, user, password):
        raise NotImplementedError()

    def request(self, method, path, query=None, body=None, content_type=None):
        """
        Performs a request and returns the parsed response body, or ``None`` if the body is empty.

        Transport errors are raised; HTTP error statuses are not, they are reported through :meth:`get_meta`.

        :param str method: HTTP method
        :param str path: URL, or path relative to :attr:`base_url`
        :param dict query: query string parameters
        :param body: request body; dictionaries and lists are encoded as JSON
        :param str content_type: content type of ``body``
        """
        raise NotImplementedError()

    def get_meta(self):
        """
        Returns metadata about the last request and response: ``method``, ``url``, ``status``, ``headers``,
        ``request_headers`` and ``elapsed`` (seconds).
        """
        return self.meta

    def encode_body(self, body, content_type=None):
        if body is None:
            return None, content_type
        if isinstance(body, (dict, list)) or hasattr(body, 'to_dict'):
            if hasattr(body, 'to_dict'):
                body = body.to_dict()
            return json.dumps(body), content_type or MIME_TYPE_JSON
        return body, content_type

    def parse_body(self, content):
        return parse_json(content, self.options['json_depth_limit'])


class RequestsRequest(Request):
    """
    :class:`Request` implementation using a :class:`requests.Session`, which keeps connections open between requests.
    """

    def __init__(self, client, base_url, options):
        super(RequestsRequest, self).__init__(client, base_url, options)
        self.session = self._create_session()

    def _create_session(self):
        options = self.options
        session = requests.Session()
        session.headers.update(options['headers'])

        if options['compress']:
            session.headers['Accept-Encoding'] = 'gzip, deflate'
        else:
            session.headers['Accept-Encoding'] = 'identity'

        if options['keep_alive']:
            session.headers['Connection'] = 'keep-alive'
            session.headers['Keep-Alive'] = 'timeout={}'.format(options['keep_alive'])
        else:
            session.headers['Connection'] = 'close'

        if not options['verify_ssl']:
            session.verify = False
        elif options['ca_cert'] or options['ca_path']:
            session.verify = options['ca_cert'] or options['ca_path']

        if options['client_cert']:
            if options['client_cert_key']:
                session.cert = (options['client_cert'], options['client_cert_key'])
            else:
                session.cert = options['client_cert']

        if options['client_cert_pass']:
            log.warning('client_cert_pass is not supported by %s; use an unencrypted key', self.__class__.__name__)
        if options['interface']:
            log.warning('interface is not supported by %s and is ignored', self.__class__.__name__)

        session.max_redirects = options['max_redirects']
        return session

    def set_auth(self, user, password):
        self.session.auth = (user, password)

    def request(self, method, path, query=None, body=None, content_type=None):
        url = join_url(self.base_url, path)
        data, content_type = self.encode_body(body, content_type)

        headers = {}
        if content_type:
            headers['Content-Type'] = content_type

        log.debug('%s %s', method, url)
        started = time.time()
        response = self.session.request(method,
                                        url,
                                        params=query or None,
                                        data=data,
                                        headers=headers,
                                        timeout=(self.options['connect_timeout'], self.options['response_timeout']),
                                        allow_redirects=self.options['follow_redirects'])

        self.meta = {
            'method': method,
            'url': response.url,
            'status': response.status_code,
            'headers': dict(response.headers),
            'request_headers': {k: v for k, v in response.request.headers.items() if k.lower() != 'authorization'},
            'elapsed': time.time() - started
        }
        log.debug('%s %s -> %s', method, url, response.status_code)

        return self.parse_body(response.content)
