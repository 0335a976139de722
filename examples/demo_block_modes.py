"""
cryptolab — Live Demo: AES in all five block modes
==================================================
Run:  python examples/demo_block_modes.py

Encrypts and decrypts one message with every key size and mode, one-shot
and streamed, printing timing and ciphertext sizes for each.
"""

import sys, os, time, logging
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from cryptolab import AESCipher, BlockMode, CipherSession, InvalidKey

LINE = "═" * 70
MSG  = b"Streaming AES over five block modes - cryptolab demo."

def header(name):
    print(f"\n{LINE}")
    print(f"  {name}")
    print(LINE)

def ok(label, value=""):
    print(f"  ✓  {label}{f': {value}' if value else ''}")

logging.basicConfig(level=logging.WARNING, format=" %(levelname)s %(name)s: %(message)s")

# Demo material only. Real keys and IVs come from a CSPRNG and are never reused.
IV = bytes(range(16))

print(f"\n{LINE}")
print("  cryptolab — AES block-mode demo")
print(LINE)
print(f"  Message: {MSG.decode()} ({len(MSG)} bytes)\n")

# ── One-shot, every primitive ────────────────────────────────────────────────
header("ONE-SHOT — 3 key sizes × 5 modes")
for key_size in (16, 24, 32):
    key = bytes(range(key_size))
    for mode in BlockMode:
        t0 = time.perf_counter()
        a  = AESCipher(key, IV, mode)
        ct = a.encrypt(MSG)
        pt = AESCipher(key, IV, mode).decrypt(ct)
        elapsed = time.perf_counter() - t0
        assert pt == MSG
        ok(f"{a.primitive.name:<12}", f"{len(ct):3d} bytes  {elapsed*1000:.2f} ms")

# ── Streaming ────────────────────────────────────────────────────────────────
header("STREAMING — 7-byte chunks, AES-256-CBC")
key = bytes(range(32))
with CipherSession(key, IV, BlockMode.CBC).make_stream_encryptor() as enc:
    for i in range(0, len(MSG), 7):
        enc.update(MSG[i:i + 7])
    streamed = enc.finish()
one_shot = CipherSession(key, IV, BlockMode.CBC).encrypt(MSG)
ok("Streamed == one-shot", str(streamed == one_shot))
ok("Ciphertext", streamed.hex()[:48] + "...")

# ── Padding ──────────────────────────────────────────────────────────────────
header("PADDING — empty input")
for mode in BlockMode:
    ct = CipherSession(bytes(16), bytes(16), mode).encrypt(b"")
    ok(f"{mode.value}", f"{len(ct)} bytes")

# ── Errors ───────────────────────────────────────────────────────────────────
header("ERRORS — 20-byte key")
try:
    CipherSession(bytes(20), IV, BlockMode.CBC)
except InvalidKey as e:
    ok("Rejected", str(e))

print(f"\n{LINE}")
print("  ALL MODES COMPLETE")
print(LINE + "\n")
