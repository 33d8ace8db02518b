import os
from flask import Flask, request, jsonify
from flask_cors import CORS # Import CORS
import logging

from maxincome.core.brackets import ConfigError
from maxincome.core.data_loader import Data
from maxincome.maxincome import MaxIncome
from maxincome.utils.pulp import SolveStatus

logging.basicConfig(level=logging.INFO)

app = Flask(__name__)

# Comma separated list, e.g. "https://your-app.com,http://localhost:3000"
allowed_origins_str = os.environ.get('CORS_ORIGINS', "http://localhost:*,http://127.0.0.1:*")
logging.info(f"CORS origins: {allowed_origins_str}")
allowed_origins = [origin.strip() for origin in allowed_origins_str.split(',') if origin.strip()]

CORS(app,
     origins=allowed_origins,
     methods=["POST", "OPTIONS"],
     allow_headers=["Content-Type", "Authorization"])

@app.route('/calculate', methods=['POST'])
def calculate_plan():
    """
    Allocates income across brackets for the plan given as the JSON request body.
    """
    if not request.is_json:
        return jsonify({"error": "Request must be JSON"}), 400

    config_data = request.get_json()

    try:
        data = Data()
        data.load_config(config_data)

        args_data = config_data.get('arguments', {})
        maxincome = MaxIncome(data, solver_name=args_data.get('solver', 'cbc'))
        status = maxincome.solve(timelimit=args_data.get('timelimit'))
        if status is not SolveStatus.OPTIMAL:
            return jsonify({"error": "No optimal solution", "status": status.value}), 422
        results = maxincome.get_results()
        # JSON object keys must be strings
        results['years'] = {str(y): v for y, v in results['years'].items()}
        return jsonify(results)
    except (ConfigError, TypeError, KeyError) as e:
        logging.info(f"Rejected configuration: {e}")
        return jsonify({"error": f"Bad configuration: {e}"}), 400
    except Exception as e:
        logging.exception("Calculation failed")
        return jsonify({"error": f"Calculation failed: {str(e)}"}), 500

def main():
    """Entry point for running the Flask server."""
    app.run(debug=(os.environ.get('FLASK_ENV') == 'development'),
            host='0.0.0.0',
            port=int(os.environ.get("PORT", 5001)))

if __name__ == '__main__':
    main()
