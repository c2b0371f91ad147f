import base64
import json
import os
import tempfile
import time
import unittest

from flask import Flask, abort, jsonify, request, url_for

from gdapi import Client
from gdapi.registry import clients
from gdapi.transport import Request, join_url

BASE_URL = 'http://localhost/v1'

SCHEMAS = {
    'widget': {
        'resourceFields': {
            'name': {'type': 'string'},
            'tags': {'type': 'array[string]'},
        },
        'collectionMethods': ['GET', 'POST'],
        'resourceMethods': ['GET', 'PUT', 'DELETE'],
        'collectionFilters': {'name': {'modifiers': ['eq', 'ne']}},
        'resourceActions': {'polish': {'output': 'widget'}},
    },
    'gadget': {
        'resourceFields': {'size': {'type': 'int'}},
        'collectionMethods': ['GET'],
        'resourceMethods': ['GET'],
    },
}


def schema_collection(names=('widget', 'gadget'), root=BASE_URL):
    """
    Returns a schema collection document describing the given types.
    """
    return {
        'type': 'collection',
        'resourceType': 'schema',
        'links': {'self': root + '/schemas', 'root': root},
        'data': [
            dict(SCHEMAS.get(name, {}),
                 id=name,
                 type='schema',
                 links={
                     'self': '{}/schemas/{}'.format(root, name),
                     'collection': '{}/{}s'.format(root, name),
                 })
            for name in names
        ]
    }


def create_app():
    """
    A small API in the shape the client expects: an unversioned root, a ``v1`` version with a schema listing and a
    ``widgets`` collection backed by a dictionary.
    """
    app = Flask(__name__)
    app.config['WIDGETS'] = {}
    app.config['SEQUENCE'] = [0]

    def error(status, code, message):
        response = jsonify({'type': 'error', 'status': status, 'code': code, 'message': message})
        response.status_code = status
        return response

    def route(rule, **options):
        def decorator(f):
            endpoint = options.pop('endpoint', f.__name__)
            app.add_url_rule(rule, endpoint, f, **options)
            if rule != '/':
                app.add_url_rule(rule + '/', endpoint, f, **options)
            return f

        return decorator

    @app.errorhandler(404)
    def not_found(e):
        return error(404, 'NotFound', 'Not found')

    def widget_url(id):
        return url_for('widget', id=id, _external=True)

    def format_widget(id, widget):
        return dict(widget,
                    id=id,
                    type='widget',
                    links={'self': widget_url(id)},
                    actions={'polish': widget_url(id) + '/polish'})

    @route('/')
    def unversioned_root():
        return jsonify({
            'type': 'collection',
            'resourceType': 'apiversion',
            'links': {'self': url_for('unversioned_root', _external=True)},
            'data': [{'id': 'v1', 'type': 'apiversion', 'links': {'self': BASE_URL, 'schemas': BASE_URL + '/schemas'}}]
        })

    @route('/v1')
    def version():
        return jsonify({'id': 'v1', 'type': 'apiversion', 'links': {'self': BASE_URL, 'schemas': BASE_URL + '/schemas'}})

    @route('/v1/schemas')
    def schemas():
        return jsonify(schema_collection())

    @route('/v2')
    def version_without_schemas():
        return jsonify({'id': 'v2', 'type': 'apiversion', 'links': {}})

    @route('/v3')
    def not_an_api():
        return jsonify([1, 2, 3])

    @route('/v4')
    def empty():
        return '', 204

    @route('/v5')
    def not_utf8():
        return app.response_class(b'{"type": "\xff"}', mimetype='application/json')

    @route('/v6')
    def too_deep():
        return app.response_class('[' * 100000 + ']' * 100000, mimetype='application/json')

    @route('/v1/whoami')
    def whoami():
        auth = request.authorization
        return jsonify({'type': 'identity', 'username': auth.username if auth else None})

    @route('/v1/widgets', methods=['GET', 'POST'])
    def widgets():
        items = app.config['WIDGETS']

        if request.method == 'POST':
            data = request.get_json()
            if not data or not data.get('name'):
                return error(422, 'MissingRequired', 'name is required')
            app.config['SEQUENCE'][0] += 1
            id = str(app.config['SEQUENCE'][0])
            items[id] = {'name': data['name'], 'tags': data.get('tags', [])}
            response = jsonify(format_widget(id, items[id]))
            response.status_code = 201
            return response

        results = [format_widget(id, widget) for id, widget in sorted(items.items(), key=lambda item: int(item[0]))]
        if 'name' in request.args:
            results = [w for w in results if w['name'] in request.args.getlist('name')]
        if 'name_ne' in request.args:
            results = [w for w in results if w['name'] not in request.args.getlist('name_ne')]

        marker = int(request.args.get('marker', 0))
        limit = int(request.args.get('limit', 100))
        page = results[marker:marker + limit]

        next_url = None
        if marker + limit < len(results):
            next_url = url_for('widgets', marker=marker + limit, limit=limit, _external=True)

        return jsonify({
            'type': 'collection',
            'resourceType': 'widget',
            'links': {'self': request.url},
            'data': page,
            'pagination': {'limit': limit, 'marker': marker, 'next': next_url},
        })

    @route('/v1/widgets/<id>', methods=['GET', 'PUT', 'DELETE'], endpoint='widget')
    def widget(id):
        items = app.config['WIDGETS']
        if id not in items:
            return error(404, 'NotFound', 'Widget {} not found'.format(id))

        if request.method == 'PUT':
            items[id].update(request.get_json())
        elif request.method == 'DELETE':
            del items[id]
            return '', 204

        return jsonify(format_widget(id, items[id]))

    @route('/v1/widgets/<id>/polish', methods=['POST'])
    def polish(id):
        items = app.config['WIDGETS']
        if id not in items:
            abort(404)
        items[id]['name'] = items[id]['name'] + ' (polished)'
        return jsonify(format_widget(id, items[id]))

    return app


class FlaskRequest(Request):
    """
    Sends requests to the Flask application given with the ``flask_app`` option, through its test client.
    """

    def __init__(self, client, base_url, options):
        super(FlaskRequest, self).__init__(client, base_url, options)
        self.test_client = options['flask_app'].test_client()
        self.headers = dict(options['headers'])
        self.calls = []

    def set_auth(self, user, password):
        token = base64.b64encode('{}:{}'.format(user, password).encode('utf-8')).decode('ascii')
        self.headers['Authorization'] = 'Basic ' + token

    def request(self, method, path, query=None, body=None, content_type=None):
        url = join_url(self.base_url, path)
        data, content_type = self.encode_body(body, content_type)
        self.calls.append((method, url))

        started = time.time()
        response = self.test_client.open(url,
                                         method=method,
                                         query_string=query,
                                         data=data,
                                         content_type=content_type,
                                         headers=self.headers)
        self.meta = {
            'method': method,
            'url': url,
            'status': response.status_code,
            'headers': dict(response.headers),
            'request_headers': {k: v for k, v in self.headers.items() if k != 'Authorization'},
            'elapsed': time.time() - started
        }
        return self.parse_body(response.get_data())


class BaseTestCase(unittest.TestCase):

    def setUp(self):
        super(BaseTestCase, self).setUp()
        self.app = self.create_app()
        Client.set_cache(None)
        clients.clear()

    def tearDown(self):
        Client.set_cache(None)
        clients.clear()
        super(BaseTestCase, self).tearDown()

    def create_app(self):
        return create_app()

    def create_client(self, base_url=BASE_URL, access_key=None, secret_key=None, **options):
        options.setdefault('request_class', FlaskRequest)
        options.setdefault('flask_app', self.app)
        return Client(base_url, access_key, secret_key, options)

    def write_json_file(self, document):
        fd, path = tempfile.mkstemp(suffix='.json')
        with os.fdopen(fd, 'w') as f:
            json.dump(document, f)
        self.addCleanup(os.remove, path)
        return path

    def assertJSONEqual(self, first, second, msg=None):
        self.assertEqual(json.loads(json.dumps(first)), json.loads(json.dumps(second)), msg)
