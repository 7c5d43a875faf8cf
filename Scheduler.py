from collections import namedtuple

from Instruction import Opcode
from Timing import TimingConfig

# First instruction enters ID here (IF=1).
FIRST_ID_CYCLE = 2

Hazard = namedtuple("Hazard", ["kind", "consumer", "producer", "required_id"])


def silent(message):
    pass


class PipelineScheduler:
    """
    Assigns IF/ID/EX/MEM/WB cycles to an in-order instruction stream.

    Every instruction is placed once, in program order, by pushing its ID stage
    past all data and memory hazards against earlier instructions. EX, MEM and
    WB then follow ID at fixed offsets and IF is held one cycle before ID.
    """

    def __init__(self, timing: TimingConfig = None, debug=None):
        self.timing = timing or TimingConfig()
        self.debug = debug or silent
        self.hazards = []
        self.stall_count = 0  # Total stall cycles.

    # --- Helper Methods for Hazard Detection ---
    def data_available_cycle(self, producer):
        """Return the cycle at which the value written by `producer` can be forwarded."""
        if producer.opcode == Opcode.LOAD:
            return producer.WB
        if producer.opcode in Opcode.ALU:
            return producer.MEM
        return None

    def detect_raw_hazard(self, curr, prev):
        """ID must come after the cycle the read register's value becomes available."""
        if prev.destination is None or prev.destination not in curr.reads():
            return None
        return self.data_available_cycle(prev) + 1

    def detect_waw_hazard(self, curr, prev):
        """WB of `curr` must land strictly after WB of `prev`."""
        if curr.destination is None or curr.destination != prev.destination:
            return None
        # WB = ID + 2 + writeback offset
        return prev.WB - 2 - curr.writeback_offset() + 1

    def detect_war_hazard(self, curr, prev):
        """`curr` must not write a register before `prev` has read it in ID."""
        if curr.destination is None or curr.destination not in prev.reads():
            return None
        return prev.ID + 1

    def detect_memory_order_hazard(self, curr, prev):
        """Accesses to the same memory location keep program order."""
        if not (curr.is_memory_op and prev.is_memory_op):
            return None
        if curr.memory_location != prev.memory_location:
            return None
        return prev.MEM + 1

    def detect_data_hazards(self, curr, prev):
        """Yield (kind, required ID cycle) for every hazard between `prev` and `curr`."""
        checks = (
            ("RAW", self.detect_raw_hazard),
            ("WAW", self.detect_waw_hazard),
            ("WAR", self.detect_war_hazard),
            ("MEM", self.detect_memory_order_hazard),
        )
        for kind, check in checks:
            required_id = check(curr, prev)
            if required_id is not None:
                yield kind, required_id

    def is_dependent_alu_pair(self, curr, prev):
        if not (curr.is_alu_op and prev.is_alu_op):
            return False
        return prev.destination is not None and prev.destination in curr.reads()

    # --- Placement ---
    def place(self, inst, id_cycle):
        inst.IF = id_cycle - 1
        inst.ID = id_cycle
        inst.EX = id_cycle + 1
        inst.MEM = id_cycle + 2
        inst.WB = inst.MEM + inst.writeback_offset()

    def schedule_first(self, inst):
        self.place(inst, FIRST_ID_CYCLE)
        inst.stalled = False

    def schedule_next(self, instructions, i):
        curr = instructions[i]
        prev = instructions[i - 1]

        # One instruction per cycle behind the previous fetch.
        baseline_id = prev.IF + 2
        required_id = baseline_id

        for j in range(i):
            for kind, hazard_id in self.detect_data_hazards(curr, instructions[j]):
                if hazard_id > baseline_id:
                    self.hazards.append(Hazard(kind, i, j, hazard_id))
                    self.debug(f"{kind} hazard: Instruction {i} waiting on instruction {j} until ID={hazard_id}")
                required_id = max(required_id, hazard_id)

        if curr.is_memory_op and prev.is_memory_op and self.timing.memory_busy_penalty:
            required_id += self.timing.memory_busy_penalty
            self.hazards.append(Hazard("STRUCTURAL", i, i - 1, required_id))
            self.debug(f"Structural hazard: memory unit busy, Instruction {i} delayed "
                       f"{self.timing.memory_busy_penalty} cycle(s)")

        if self.is_dependent_alu_pair(curr, prev) and self.timing.dependent_alu_penalty:
            required_id += self.timing.dependent_alu_penalty
            self.hazards.append(Hazard("ALU", i, i - 1, required_id))
            self.debug(f"Dependent ALU operation: Instruction {i} delayed "
                       f"{self.timing.dependent_alu_penalty} cycle(s)")

        self.place(curr, required_id)
        curr.stalled = curr.ID > baseline_id
        self.stall_count += curr.ID - baseline_id

    def schedule(self, instructions):
        """
        Compute the stage cycles of every instruction in a single forward pass.

        Args:
            instructions (list): decoded Instructions in program order

        Returns:
            tuple: (instructions, total_cycles); total_cycles is 0 for an empty list
        """
        self.hazards = []
        self.stall_count = 0

        if not instructions:
            return instructions, 0

        self.debug(f"Starting simulation with {len(instructions)} instructions")

        for i, inst in enumerate(instructions):
            if i == 0:
                self.schedule_first(inst)
            else:
                self.schedule_next(instructions, i)
            self.debug(describe(inst, i))

        total_cycles = max(inst.WB for inst in instructions)
        self.debug(f"Simulation complete. Total cycles: {total_cycles}")
        return instructions, total_cycles


def describe(inst, index):
    stages = " ".join(f"{stage}={cycle}" for stage, cycle in inst.stage_cycles().items())
    line = f"Instruction {index} ({inst}): {stages}"
    if inst.stalled:
        line += " (STALLED)"
    return line


def schedule(instructions, timing=None, debug=None):
    return PipelineScheduler(timing, debug).schedule(instructions)
