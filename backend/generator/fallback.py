"""Canned schema and route returned whenever generation fails."""

from __future__ import annotations

from backend.generator.models import GeneratedCode

FALLBACK_SQL_SCHEMA = """\
-- Fallback SQL Schema
-- Generated when AI service is unavailable

CREATE TABLE IF NOT EXISTS users (
  id SERIAL PRIMARY KEY,
  email VARCHAR(255) UNIQUE NOT NULL,
  username VARCHAR(100) NOT NULL,
  created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
  updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS form_submissions (
  id SERIAL PRIMARY KEY,
  user_id INTEGER REFERENCES users(id),
  form_data JSONB NOT NULL,
  submitted_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX idx_users_email ON users(email);
CREATE INDEX idx_submissions_user ON form_submissions(user_id);"""

FALLBACK_NODE_ROUTE = """\
// Fallback Node.js Express Route
// Generated when AI service is unavailable

const express = require('express');
const router = express.Router();

// Middleware
router.use(express.json());

// Get all records
router.get('/users', async (req, res) => {
  try {
    res.json({ message: 'Get all users', data: [] });
  } catch (error) {
    res.status(500).json({ error: error.message });
  }
});

// Get single record
router.get('/users/:id', async (req, res) => {
  try {
    const { id } = req.params;
    res.json({ message: 'Get user by id', id });
  } catch (error) {
    res.status(500).json({ error: error.message });
  }
});

// Create record
router.post('/users', async (req, res) => {
  try {
    const userData = req.body;
    res.status(201).json({ message: 'User created', data: userData });
  } catch (error) {
    res.status(500).json({ error: error.message });
  }
});

// Update record
router.put('/users/:id', async (req, res) => {
  try {
    const { id } = req.params;
    const userData = req.body;
    res.json({ message: 'User updated', id, data: userData });
  } catch (error) {
    res.status(500).json({ error: error.message });
  }
});

// Delete record
router.delete('/users/:id', async (req, res) => {
  try {
    const { id } = req.params;
    res.json({ message: 'User deleted', id });
  } catch (error) {
    res.status(500).json({ error: error.message });
  }
});

module.exports = router;"""


def fallback_code() -> GeneratedCode:
    """Return a fresh copy of the canned two-table schema and CRUD route."""
    return GeneratedCode(sql_schema=FALLBACK_SQL_SCHEMA, node_route=FALLBACK_NODE_ROUTE)
