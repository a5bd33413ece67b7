from flask import Flask, request, jsonify
from flask_cors import CORS
import click
import traceback

from config import Config
from exceptions import ConfigurationError
from utils import (
    build_participants,
    format_report,
    parse_pair,
    settle,
    validate_settlement_data
)

app = Flask(__name__)
app.config.from_object(Config)
CORS(app)

@app.route('/api/health', methods=['GET'])
def health_check():
    return jsonify({'status': 'healthy'}), 200

@app.route('/api/settle', methods=['POST'])
def create_settlement():
    """Settle a shared bill"""
    try:
        data = request.get_json(silent=True)

        # Validate input data
        is_valid, error_message = validate_settlement_data(data)
        if not is_valid:
            return jsonify({'error': error_message}), 400

        participants = build_participants(data.get('participants', []), data['headcount'])
        result = settle(participants, strategy=data.get('strategy'))

        response = result.to_dict()
        response['success'] = True
        if data.get('dot'):
            response['dot'] = result.graph.to_dot()

        return jsonify(response), 200

    except ConfigurationError as e:
        return jsonify({'error': str(e)}), 400

    except Exception as e:
        print(f"Error settling expenses: {str(e)}")
        traceback.print_exc()
        return jsonify({'error': f'Server error: {str(e)}'}), 500

@app.errorhandler(404)
def not_found(error):
    return jsonify({'error': 'Endpoint not found'}), 404

@app.errorhandler(500)
def internal_error(error):
    return jsonify({'error': 'Internal server error'}), 500

@click.command('settle')
@click.option('-n', '--num', 'headcount', type=int, required=True,
              help='Total number of people sharing the bill.')
@click.option('--dot', is_flag=True, help='Print the settlement graph in Graphviz DOT format.')
@click.option('--pairwise', is_flag=True,
              help='Only cancel out mutual debts instead of settling greedily.')
@click.argument('pairs', nargs=-1, required=True)
def settle_command(headcount, dot, pairwise, pairs):
    """Settle a shared bill from NAME=VALUE pairs of what each person spent."""
    try:
        participants = build_participants([parse_pair(pair) for pair in pairs], headcount)
    except ConfigurationError as e:
        raise click.ClickException(str(e))

    result = settle(participants, strategy='pairwise' if pairwise else None)

    if dot:
        click.echo(result.graph.to_dot(), nl=False)
    else:
        click.echo(format_report(result))

app.cli.add_command(settle_command)

if __name__ == '__main__':
    print("Starting Settle Up API...")
    print(f"Strict validation: {Config.STRICT_VALIDATION}")
    app.run(host='0.0.0.0', port=5000, debug=Config.DEBUG)
