from Instruction import Immediate, Instruction, MalformedInstruction, Opcode, Register

REGISTER_PREFIX = "R"

OPERAND_COUNT = {
    Opcode.LOAD: 2,
    Opcode.STORE: 2,
    Opcode.ADD: 3,
    Opcode.SUB: 3,
}


def is_register(token):
    return token[:1].upper() == REGISTER_PREFIX


def to_operand(token):
    if is_register(token):
        return Register(token.upper())
    return Immediate(token)


def to_register(token, role, line):
    if not is_register(token):
        raise MalformedInstruction(f"{role} must be a register, got {token!r}: {line.strip()}")
    return Register(token.upper())


def tokenize(line):
    # "ADD R1, R2, 4" -> ["ADD", "R1", "R2", "4"]
    return line.strip().replace(",", " ").split()


def decode(line):
    """
    Decode one textual instruction line.

    Args:
        line (str): e.g. "LOAD R1, 0" or "SUB R3, R1, 7"

    Returns:
        Instruction: the decoded record, stage cycles unset

    Raises:
        MalformedInstruction: empty line, unknown mnemonic or wrong operand shape
    """
    tokens = tokenize(line)
    if not tokens:
        raise MalformedInstruction("empty instruction line")

    op = tokens[0].upper()
    if op not in Opcode.ALL:
        raise MalformedInstruction(f"unknown instruction type: {line.strip()}")

    operands = tokens[1:]
    if len(operands) != OPERAND_COUNT[op]:
        raise MalformedInstruction(
            f"{op} takes {OPERAND_COUNT[op]} operands, got {len(operands)}: {line.strip()}")

    text = f"{op} {', '.join(operands)}"

    if op == Opcode.LOAD:
        return Instruction(op,
                           destination=to_register(operands[0], "LOAD destination", line),
                           memory_location=operands[1],
                           text=text)
    if op == Opcode.STORE:
        return Instruction(op,
                           source1=to_register(operands[0], "STORE source", line),
                           memory_location=operands[1],
                           text=text)
    return Instruction(op,
                       destination=to_register(operands[0], op + " destination", line),
                       source1=to_operand(operands[1]),
                       source2=to_operand(operands[2]),
                       text=text)


def decode_program(lines, warn=None, skip_blank=False):
    """Decode lines in order, dropping malformed ones.

    Returns (instructions, skipped) where skipped holds
    (line_number, line, reason) for every dropped line. Line numbers count
    every input line, including blank ones passed over with skip_blank.
    """
    instructions = []
    skipped = []
    for number, line in enumerate(lines, start=1):
        if skip_blank and not line.strip():
            continue
        try:
            instructions.append(decode(line))
        except MalformedInstruction as e:
            skipped.append((number, line.rstrip("\r\n"), str(e)))
            if warn is not None:
                warn(f"Warning: skipping line {number}: {e}")
    return instructions, skipped
