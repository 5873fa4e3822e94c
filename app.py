from flask import Flask, Response, abort, current_app, jsonify, redirect, render_template, request, url_for

import constants
import QRcode
import util
from config import Config


def render_index(request, template, result):
    if request.method == 'POST':
        data = request.form['data']
        size = request.form.get('size', current_app.config['LABEL_DEFAULT_SIZE'])
        qty = request.form.get('qty', 1)
        return redirect(url_for(result, data = data, size = size, qty = qty))
    return render_template(template, sizes = list(constants.LABEL_MODULE_SIZE))


def required_data():
    data = request.args.get('data')
    if not data:
        abort(400, description='Missing data parameter')
    return data


def int_arg(name, default, low, high):
    raw = request.args.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        abort(400, description='{} must be an integer'.format(name))
    if not low <= value <= high:
        abort(400, description='{} must be between {} and {}'.format(name, low, high))
    return value


def render_label(request, template):
    data = required_data()
    size = request.args.get('size', current_app.config['LABEL_DEFAULT_SIZE'])
    if size not in constants.LABEL_MODULE_SIZE:
        abort(400, description='Unknown label size {!r}'.format(size))
    qty = int_arg('qty', 1, 1, current_app.config['LABEL_MAX_QTY'])

    svg = QRcode.generate_svg(data, constants.LABEL_MODULE_SIZE[size])
    current_app.logger.info('Printing %d %s label(s) for %r', qty, size, data)

    return render_template(template, data = data, svg = svg, size = size, qty = qty,
                           shop = current_app.config['LABEL_SHOP_NAME'])


def create_app(config_object = None):
    app = Flask(__name__)
    app.config.from_object(config_object or Config)
    app.config.from_prefixed_env('LABELQR')

    @app.errorhandler(400)
    def bad_request(e):
        return jsonify(error = e.description), 400

    @app.errorhandler(util.UnsupportedCharacterError)
    def unsupported_character(e):
        app.logger.warning('Rejected payload: %s', e)
        return jsonify(error = str(e)), 400

    @app.errorhandler(util.DataOverflowError)
    def data_overflow(e):
        app.logger.warning('Rejected payload: %s', e)
        return jsonify(error = str(e)), 413

    @app.route('/', methods = ['POST', 'GET'])
    def index():
        return render_index(request, 'index.html', 'label')

    @app.route('/label')
    def label():
        return render_label(request, 'label.html')

    @app.route('/qr.svg')
    def qr_svg():
        data = required_data()
        module_size = int_arg('module_size', app.config['QR_MODULE_SIZE'], 1,
                              app.config['QR_MAX_MODULE_SIZE'])
        return Response(QRcode.generate_svg(data, module_size), mimetype = 'image/svg+xml')

    @app.route('/qr.png')
    def qr_png():
        data = required_data()
        module_size = int_arg('module_size', app.config['QR_MODULE_SIZE'], 1,
                              app.config['QR_MAX_MODULE_SIZE'])
        q = QRcode.QRcode(data, module_size = module_size)
        return Response(q.png_bytes(), mimetype = 'image/png')

    return app


if __name__ == '__main__':
    create_app().run(debug=True, port=8081)
