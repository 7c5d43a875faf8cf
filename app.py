from flask import Flask, request, jsonify
from flask_cors import CORS

from Simulator import Simulator
from Timing import TimingConfig

app = Flask(__name__)
CORS(app)  # Enable CORS for all routes


@app.route('/simulate', methods=['POST'])
def simulate():
    data = request.get_json(silent=True) or {}
    program = data.get('program')
    if not isinstance(program, str):
        return jsonify({'error': "'program' must be a string of instruction lines"}), 400

    timing = data.get('timing') or {}
    if not isinstance(timing, dict):
        return jsonify({'error': "'timing' must be an object"}), 400
    try:
        timing = TimingConfig(**timing)
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    sim = Simulator(timing=timing)
    sim.load_program(program.split('\n'), skip_blank=True)
    sim.run()

    return jsonify({
        'clock': sim.clock,
        'stalls': sim.stall_count,
        'ipc': sim.get_ipc(),
        'timing': timing.as_dict(),
        'instructions': [inst.to_dict() for inst in sim.instructions],
        'skipped': [
            {'line': number, 'text': text, 'reason': reason}
            for number, text, reason in sim.skipped
        ],
        'hazards': [hazard._asdict() for hazard in sim.hazards],
    })


if __name__ == '__main__':
    app.run(port=5000)
