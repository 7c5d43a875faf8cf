import matplotlib.pyplot as plt
import numpy as np

from Decoder import decode_program
from Instruction import STAGES
from Scheduler import PipelineScheduler, describe
from Timing import TimingConfig

# Cell values of the pipeline chart; 0 means the instruction is not in a stage.
STAGE_CODES = {stage: code for code, stage in enumerate(STAGES, start=1)}


class Simulator:
    def __init__(self, timing=None, debug=None, warn=None):
        self.timing = timing or TimingConfig()
        self.debug = debug
        self.warn = warn
        self.program = []
        self.instructions = []
        self.skipped = []
        self.hazards = []
        self.clock = 0
        self.stall_count = 0

    def load_program(self, program_lines, skip_blank=False):
        self.program = list(program_lines)
        self.instructions, self.skipped = decode_program(self.program, warn=self.warn, skip_blank=skip_blank)
        return self.instructions

    def run(self):
        scheduler = PipelineScheduler(self.timing, self.debug)
        self.instructions, self.clock = scheduler.schedule(self.instructions)
        self.hazards = scheduler.hazards
        self.stall_count = scheduler.stall_count
        return self.clock

    def get_ipc(self):
        if self.clock == 0:
            return 0.0
        return len(self.instructions) / self.clock

    def narrate(self):
        return [describe(inst, i) for i, inst in enumerate(self.instructions)]

    def stage_matrix(self):
        """
        Build the pipeline diagram as an (instructions x cycles) array.

        Column c holds cycle c + 1. The gap a LOAD leaves between MEM and WB
        stays 0.
        """
        matrix = np.zeros((len(self.instructions), self.clock), dtype=int)
        for row, inst in enumerate(self.instructions):
            for stage, cycle in inst.stage_cycles().items():
                matrix[row, cycle - 1] = STAGE_CODES[stage]
        return matrix

    def display(self):
        matrix = self.stage_matrix()
        plt.figure(figsize=(max(6, self.clock * 0.6), max(2, len(self.instructions) * 0.6)))
        plt.imshow(matrix, cmap="Blues", aspect='auto', vmin=0, vmax=len(STAGES))
        for i, inst in enumerate(self.instructions):
            for stage, cycle in inst.stage_cycles().items():
                plt.text(cycle - 1, i, stage, ha='center', va='center', color='black')
        plt.yticks(range(len(self.instructions)), [str(inst) for inst in self.instructions])
        plt.xticks(range(self.clock), range(1, self.clock + 1))
        plt.xlabel("Cycle")
        plt.title(f"Pipeline schedule ({self.clock} cycles, {self.stall_count} stall cycles)")
        plt.tight_layout()
        plt.show()
