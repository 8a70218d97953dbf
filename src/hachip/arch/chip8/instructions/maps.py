# hachip/arch/chip8/instructions/maps.py
"""
命令ワードから命令種別、命令種別からデコード/実行関数へのマッピング定義。
"""
from . import control
from . import alu
from . import load
from . import graphics
from . import keys
from .base import InstructionKind as K

# @intent:map 上位4bit（命令ファミリー）だけで種別が決まるもの。
# 5xy0, 9xy0 は下位4bitを参照しません。
FAMILY_MAP = {
    0x1: K.JP,
    0x2: K.CALL,
    0x3: K.SE_VX_BYTE,
    0x4: K.SNE_VX_BYTE,
    0x5: K.SE_VX_VY,
    0x6: K.LD_VX_BYTE,
    0x7: K.ADD_VX_BYTE,
    0x9: K.SNE_VX_VY,
    0xA: K.LD_I_ADDR,
    0xB: K.JP_V0_ADDR,
    0xC: K.RND,
    0xD: K.DRW,
}

# @intent:map ファミリー0: 命令ワード全体で一致させます。
SYSTEM_MAP = {
    0x00E0: K.CLS,
    0x00EE: K.RET,
}

# @intent:map ファミリー8: 下位4bitで選択します。
ALU_MAP = {
    0x0: K.LD_VX_VY,
    0x1: K.OR,
    0x2: K.AND,
    0x3: K.XOR,
    0x4: K.ADD_VX_VY,
    0x5: K.SUB,
    0x6: K.SHR,
    0x7: K.SUBN,
    0xE: K.SHL,
}

# @intent:map ファミリーE: 下位8bitで選択します。
KEY_MAP = {
    0x9E: K.SKP,
    0xA1: K.SKNP,
}

# @intent:map ファミリーF: 下位8bitで選択します。
MISC_MAP = {
    0x07: K.LD_VX_DT,
    0x0A: K.LD_VX_K,
    0x15: K.LD_DT_VX,
    0x18: K.LD_ST_VX,
    0x1E: K.ADD_I_VX,
    0x29: K.LD_F_VX,
    0x33: K.LD_B_VX,
    0x55: K.LD_I_VX,
    0x65: K.LD_VX_I,
}


# @intent:responsibility 命令ワードを命令種別に分類します。該当しないワードはUNKNOWNです。
def classify(opcode: int) -> K:
    family = (opcode >> 12) & 0xF
    if family == 0x0:
        return SYSTEM_MAP.get(opcode, K.UNKNOWN)
    if family == 0x8:
        return ALU_MAP.get(opcode & 0xF, K.UNKNOWN)
    if family == 0xE:
        return KEY_MAP.get(opcode & 0xFF, K.UNKNOWN)
    if family == 0xF:
        return MISC_MAP.get(opcode & 0xFF, K.UNKNOWN)
    return FAMILY_MAP.get(family, K.UNKNOWN)


# @intent:map 命令種別からデコード関数へのマッピングテーブル。
DECODE_MAP = {
    # Control
    K.RET: control.decode_ret,
    K.JP: control.decode_jp,
    K.CALL: control.decode_call,
    K.SE_VX_BYTE: control.decode_se_vx_byte,
    K.SNE_VX_BYTE: control.decode_sne_vx_byte,
    K.SE_VX_VY: control.decode_se_vx_vy,
    K.SNE_VX_VY: control.decode_sne_vx_vy,
    K.JP_V0_ADDR: control.decode_jp_v0_addr,

    # ALU
    K.ADD_VX_BYTE: alu.decode_add_vx_byte,
    K.LD_VX_VY: alu.decode_ld_vx_vy,
    K.OR: alu.decode_or,
    K.AND: alu.decode_and,
    K.XOR: alu.decode_xor,
    K.ADD_VX_VY: alu.decode_add_vx_vy,
    K.SUB: alu.decode_sub,
    K.SHR: alu.decode_shr,
    K.SUBN: alu.decode_subn,
    K.SHL: alu.decode_shl,
    K.RND: alu.decode_rnd,

    # Load/Store
    K.LD_VX_BYTE: load.decode_ld_vx_byte,
    K.LD_I_ADDR: load.decode_ld_i_addr,
    K.LD_VX_DT: load.decode_ld_vx_dt,
    K.LD_DT_VX: load.decode_ld_dt_vx,
    K.LD_ST_VX: load.decode_ld_st_vx,
    K.ADD_I_VX: load.decode_add_i_vx,
    K.LD_F_VX: load.decode_ld_f_vx,
    K.LD_B_VX: load.decode_ld_b_vx,
    K.LD_I_VX: load.decode_ld_i_vx,
    K.LD_VX_I: load.decode_ld_vx_i,

    # Graphics
    K.CLS: graphics.decode_cls,
    K.DRW: graphics.decode_drw,

    # Keys
    K.SKP: keys.decode_skp,
    K.SKNP: keys.decode_sknp,
    K.LD_VX_K: keys.decode_ld_vx_k,
}

# @intent:map 命令種別から実行関数へのマッピングテーブル。
EXECUTE_MAP = {
    # Control
    K.RET: control.execute_ret,
    K.JP: control.execute_jp,
    K.CALL: control.execute_call,
    K.SE_VX_BYTE: control.execute_se_vx_byte,
    K.SNE_VX_BYTE: control.execute_sne_vx_byte,
    K.SE_VX_VY: control.execute_se_vx_vy,
    K.SNE_VX_VY: control.execute_sne_vx_vy,
    K.JP_V0_ADDR: control.execute_jp_v0_addr,

    # ALU
    K.ADD_VX_BYTE: alu.execute_add_vx_byte,
    K.LD_VX_VY: alu.execute_ld_vx_vy,
    K.OR: alu.execute_or,
    K.AND: alu.execute_and,
    K.XOR: alu.execute_xor,
    K.ADD_VX_VY: alu.execute_add_vx_vy,
    K.SUB: alu.execute_sub,
    K.SHR: alu.execute_shr,
    K.SUBN: alu.execute_subn,
    K.SHL: alu.execute_shl,
    K.RND: alu.execute_rnd,

    # Load/Store
    K.LD_VX_BYTE: load.execute_ld_vx_byte,
    K.LD_I_ADDR: load.execute_ld_i_addr,
    K.LD_VX_DT: load.execute_ld_vx_dt,
    K.LD_DT_VX: load.execute_ld_dt_vx,
    K.LD_ST_VX: load.execute_ld_st_vx,
    K.ADD_I_VX: load.execute_add_i_vx,
    K.LD_F_VX: load.execute_ld_f_vx,
    K.LD_B_VX: load.execute_ld_b_vx,
    K.LD_I_VX: load.execute_ld_i_vx,
    K.LD_VX_I: load.execute_ld_vx_i,

    # Graphics
    K.CLS: graphics.execute_cls,
    K.DRW: graphics.execute_drw,

    # Keys
    K.SKP: keys.execute_skp,
    K.SKNP: keys.execute_sknp,
    K.LD_VX_K: keys.execute_ld_vx_k,
}
